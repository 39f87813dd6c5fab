"""构建服务模块

提供 .love 归档和各平台发布包构建的核心功能。
"""

from .build_context import (
    BuildContext,
    BuildError,
    SourceNotFound,
    PatternError,
    RuntimeNotFound,
    UnsupportedTargetError,
    FileSystemError,
    InvalidProjectLayout,
    MetadataRewriteError,
)
from .models import (
    Bitness,
    BuildSettings,
    BuildStatistics,
    DEFAULT_LOVE_VERSION,
    LoveVersion,
    Platform,
    Project,
    RuntimeLocation,
    Target,
    expand_targets,
)
from .collector import ExclusionFilter, FileCollector, FileInfo, collect_files, should_exclude
from .archiver import ArchiveResult, build_archive, build_archive_from_paths, create_love_archive
from .windows import create_windows_artifact
from .macos import create_macos_artifact
from .plist import rewrite_info_plist
from .builder import Builder, BuildResult

__all__ = [
    # 主构建器
    "Builder",
    "BuildResult",
    "BuildContext",

    # 错误
    "BuildError",
    "SourceNotFound",
    "PatternError",
    "RuntimeNotFound",
    "UnsupportedTargetError",
    "FileSystemError",
    "InvalidProjectLayout",
    "MetadataRewriteError",

    # 数据模型
    "Bitness",
    "BuildSettings",
    "BuildStatistics",
    "DEFAULT_LOVE_VERSION",
    "LoveVersion",
    "Platform",
    "Project",
    "RuntimeLocation",
    "Target",
    "expand_targets",

    # 文件收集与归档
    "ExclusionFilter",
    "FileCollector",
    "FileInfo",
    "collect_files",
    "should_exclude",
    "ArchiveResult",
    "build_archive",
    "build_archive_from_paths",
    "create_love_archive",

    # 平台构建
    "create_windows_artifact",
    "create_macos_artifact",
    "rewrite_info_plist",
]
