"""
日志工具 - 统一输出门面

带时间戳的统一输出接口，封装底层的 Rich Console 和标准输出。
所有构建阶段都通过这里输出，便于统一控制级别和日志文件。
"""

import atexit
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from rich.console import Console
from rich.markup import escape


class OutputLevel:
    """输出级别常量"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogStage:
    """日志阶段标记"""
    INIT = "INIT"
    COLLECT = "COLLECT"
    ARCHIVE = "ARCHIVE"
    WINDOWS = "WINDOWS"
    MACOS = "MACOS"
    PLIST = "PLIST"
    RUNTIME = "RUNTIME"
    DOWNLOAD = "DOWNLOAD"
    CONFIG = "CONFIG"
    BUILD = "BUILD"
    DONE = "DONE"


_LEVEL_ORDER = {
    OutputLevel.DEBUG: 0,
    OutputLevel.INFO: 1,
    OutputLevel.SUCCESS: 1,
    OutputLevel.WARNING: 2,
    OutputLevel.ERROR: 3,
}

_LEVEL_STYLES = {
    OutputLevel.DEBUG: "dim",
    OutputLevel.INFO: "default",
    OutputLevel.SUCCESS: "green",
    OutputLevel.WARNING: "yellow",
    OutputLevel.ERROR: "red bold",
}


class OutputFacade:
    """输出门面

    统一封装所有输出操作。所有输出都包含时间戳，支持彩色输出，
    可选同时写入日志文件。
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._console = Console(
            file=sys.stdout,
            highlight=False,
            log_time=False,
            log_path=False,
        )
        self._error_console = Console(file=sys.stderr, highlight=False)
        self._file_handle: Optional[Any] = None
        self._log_level = OutputLevel.INFO
        self._date_format = "%Y-%m-%d %H:%M:%S"
        self._time_format = "%H:%M:%S"

    def _get_timestamp(self, include_date: bool = False) -> str:
        now = datetime.now()
        return now.strftime(self._date_format if include_date else self._time_format)

    def _should_output(self, level: str) -> bool:
        current_level = _LEVEL_ORDER.get(self._log_level, 1)
        return _LEVEL_ORDER.get(level, 1) >= current_level

    def _format_message(self, message: str, level: str, stage: Optional[str] = None,
                        include_date: bool = False) -> str:
        timestamp = self._get_timestamp(include_date)
        if stage:
            return f"[{timestamp}] [{level}] [{stage}] {message}"
        return f"[{timestamp}] [{level}] {message}"

    def _emit(self, message: str, level: str, stage: Optional[str] = None, **kwargs):
        """输出一条消息到控制台和日志文件"""
        if not self._should_output(level):
            return

        with self._lock:
            timestamp = self._get_timestamp()
            stage_part = f" [cyan]{stage}[/cyan]" if stage else ""
            formatted = f"[dim]{timestamp}[/dim] [bold]{level}[/bold]{stage_part} {escape(message)}"

            # 错误输出到 stderr
            console = self._error_console if level == OutputLevel.ERROR else self._console
            try:
                console.print(formatted, style=_LEVEL_STYLES.get(level, "default"), **kwargs)
            except Exception:
                stream = sys.stderr if level == OutputLevel.ERROR else sys.stdout
                stream.write(self._format_message(message, level, stage) + "\n")
                stream.flush()

            self._write_to_file(message, level, stage)

    def _write_to_file(self, message: str, level: str, stage: Optional[str] = None):
        if not self._file_handle:
            return

        try:
            self._file_handle.write(self._format_message(message, level, stage, include_date=True) + "\n")
            self._file_handle.flush()
        except OSError:
            pass  # 日志文件写入失败不应该影响构建

    def set_level(self, level: str):
        """设置输出级别"""
        with self._lock:
            if level in _LEVEL_ORDER:
                self._log_level = level

    def get_level(self) -> str:
        return self._log_level

    def set_log_file(self, file_path: Union[str, Path]):
        """设置日志文件（追加模式）"""
        with self._lock:
            self._close_file()
            try:
                log_path = Path(file_path)
                log_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_handle = open(log_path, 'a', encoding='utf-8')
            except OSError as e:
                self.warning(f"无法打开日志文件 {file_path}: {e}")

    def _close_file(self):
        if self._file_handle:
            try:
                self._file_handle.close()
            except OSError:
                pass
            self._file_handle = None

    def debug(self, message: str, stage: Optional[str] = None, **kwargs):
        self._emit(message, OutputLevel.DEBUG, stage, **kwargs)

    def info(self, message: str, stage: Optional[str] = None, **kwargs):
        self._emit(message, OutputLevel.INFO, stage, **kwargs)

    def success(self, message: str, stage: Optional[str] = None, **kwargs):
        self._emit(message, OutputLevel.SUCCESS, stage, **kwargs)

    def warning(self, message: str, stage: Optional[str] = None, **kwargs):
        self._emit(message, OutputLevel.WARNING, stage, **kwargs)

    def error(self, message: str, stage: Optional[str] = None, **kwargs):
        self._emit(message, OutputLevel.ERROR, stage, **kwargs)

    def close(self):
        """关闭输出门面"""
        with self._lock:
            self._close_file()


# 全局输出门面实例
_output_facade: Optional[OutputFacade] = None


def get_output_facade() -> OutputFacade:
    """获取全局输出门面实例"""
    global _output_facade
    if _output_facade is None:
        _output_facade = OutputFacade()
    return _output_facade


def debug(message: str, stage: Optional[str] = None, **kwargs):
    """调试信息输出"""
    get_output_facade().debug(message, stage, **kwargs)


def info(message: str, stage: Optional[str] = None, **kwargs):
    """普通信息输出"""
    get_output_facade().info(message, stage, **kwargs)


def success(message: str, stage: Optional[str] = None, **kwargs):
    """成功信息输出"""
    get_output_facade().success(message, stage, **kwargs)


def warning(message: str, stage: Optional[str] = None, **kwargs):
    """警告信息输出"""
    get_output_facade().warning(message, stage, **kwargs)


def error(message: str, stage: Optional[str] = None, **kwargs):
    """错误信息输出"""
    get_output_facade().error(message, stage, **kwargs)


def set_log_level(level: str):
    """设置全局日志级别"""
    get_output_facade().set_level(level)


def set_log_file(file_path: Union[str, Path]):
    """设置全局日志文件"""
    get_output_facade().set_log_file(file_path)


def configure_logging(level: str = OutputLevel.INFO, log_file: Optional[Union[str, Path]] = None):
    """配置日志系统"""
    set_log_level(level)
    if log_file:
        set_log_file(log_file)


def close_logger():
    """关闭日志系统"""
    global _output_facade
    if _output_facade:
        _output_facade.close()
        _output_facade = None


atexit.register(close_logger)
