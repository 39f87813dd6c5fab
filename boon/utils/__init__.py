"""通用工具模块"""

from .logging import (
    configure_logging,
    set_log_level,
    set_log_file,
    LogStage,
    OutputLevel,
)

from .paths import (
    expand_path,
    ensure_directory,
    get_data_dir,
    directory_size,
    remove_path,
    discard_path,
    format_size,
    format_duration,
)

__all__ = [
    # 日志相关
    "configure_logging",
    "set_log_level",
    "set_log_file",
    "LogStage",
    "OutputLevel",

    # 路径相关
    "expand_path",
    "ensure_directory",
    "get_data_dir",
    "directory_size",
    "remove_path",
    "discard_path",
    "format_size",
    "format_duration",
]
