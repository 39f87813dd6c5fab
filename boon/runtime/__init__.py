"""LÖVE 运行时管理模块

提供运行时目录表、本地缓存和下载功能。
"""

from .catalog import RUNTIME_RELEASES, RuntimeRelease, get_release, releases_for_version
from .cache import RuntimeCache
from .downloader import DownloadError, RuntimeDownloader, download_love, extract_archive

__all__ = [
    "RUNTIME_RELEASES",
    "RuntimeRelease",
    "get_release",
    "releases_for_version",
    "RuntimeCache",
    "DownloadError",
    "RuntimeDownloader",
    "download_love",
    "extract_archive",
]
