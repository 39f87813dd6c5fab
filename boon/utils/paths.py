"""
路径工具

提供路径处理相关的工具函数。
"""

import os
import shutil
import sys
from pathlib import Path
from typing import Union

from .logging import warning

# 数据目录环境变量覆盖（测试和便携安装使用）
DATA_DIR_ENV = "BOON_DATA_DIR"
APP_NAME = "boon"


def expand_path(path: Union[str, Path]) -> Path:
    """扩展路径（处理环境变量和用户目录）

    Args:
        path: 原始路径

    Returns:
        Path: 扩展后的绝对路径
    """
    if isinstance(path, str):
        path = os.path.expandvars(path)
        path = os.path.expanduser(path)

    return Path(path).resolve()


def ensure_directory(path: Union[str, Path]) -> Path:
    """确保目录存在

    Args:
        path: 目录路径

    Returns:
        Path: 目录路径
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_data_dir() -> Path:
    """获取用户数据目录（LÖVE 运行时缓存根目录）

    优先使用 BOON_DATA_DIR 环境变量，否则按平台习惯：
      - Windows: %APPDATA%/boon
      - macOS:   ~/Library/Application Support/boon
      - 其他:    $XDG_DATA_HOME/boon 或 ~/.local/share/boon
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return expand_path(override)

    if sys.platform == "win32":
        base = os.environ.get("APPDATA") or "~/AppData/Roaming"
    elif sys.platform == "darwin":
        base = "~/Library/Application Support"
    else:
        base = os.environ.get("XDG_DATA_HOME") or "~/.local/share"

    return expand_path(base) / APP_NAME


def directory_size(path: Union[str, Path]) -> int:
    """递归统计目录内所有文件的大小（不跟随符号链接）

    Args:
        path: 目录路径

    Returns:
        int: 字节数
    """
    total = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            total += os.lstat(os.path.join(root, name)).st_size
    return total


def remove_path(path: Union[str, Path]) -> None:
    """删除文件或目录树（不存在时什么都不做）

    Raises:
        OSError: 删除失败
    """
    target = Path(path)
    if target.is_symlink() or target.is_file():
        target.unlink()
    elif target.is_dir():
        shutil.rmtree(target)


def discard_path(path: Union[str, Path]) -> None:
    """尽力清理中间产物，失败只记录警告

    用于错误路径上的清理，避免清理失败掩盖原始错误。
    """
    try:
        remove_path(path)
    except OSError as e:
        warning(f"无法清理 {path}: {e}")


def format_size(size_bytes: int) -> str:
    """格式化文件大小

    Args:
        size_bytes: 字节数

    Returns:
        str: 格式化的大小字符串
    """
    if size_bytes == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    else:
        return f"{size:.1f} {units[unit_index]}"


def format_duration(seconds: float) -> str:
    """格式化耗时"""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.2f} s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)} m {rest:.0f} s"
