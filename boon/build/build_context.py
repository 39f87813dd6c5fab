"""
构建上下文模块

定义构建过程中的共享数据结构和异常类。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, TYPE_CHECKING

from .models import BuildSettings, BuildStatistics, LoveVersion, Project

if TYPE_CHECKING:
    from ..runtime.cache import RuntimeCache

# 进度回调类型: (阶段, 当前, 总数, 消息)
ProgressCallback = Callable[[str, int, int, str], None]


@dataclass
class BuildContext:
    """构建上下文，包含构建过程中的共享数据"""
    project: Project
    build_settings: BuildSettings
    version: LoveVersion
    runtime_cache: "RuntimeCache"
    progress_callback: Optional[ProgressCallback] = None

    # 构建过程中生成的数据
    release_path: Optional[Path] = None
    love_file: Optional[Path] = None
    statistics: List[BuildStatistics] = field(default_factory=list)

    def report(self, stage: str, current: int, message: str = "") -> None:
        """向回调报告进度"""
        if self.progress_callback:
            self.progress_callback(stage, current, 100, message)


class BuildError(Exception):
    """构建错误"""
    pass


class SourceNotFound(BuildError):
    """归档源目录不存在或不是目录"""
    pass


class PatternError(BuildError):
    """排除规则不是合法的正则表达式"""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"无效的排除规则 '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


class RuntimeNotFound(BuildError):
    """缓存中缺少所需的 LÖVE 运行时"""
    pass


class UnsupportedTargetError(BuildError):
    """不受支持的 (版本, 平台, 架构) 组合"""
    pass


class FileSystemError(BuildError):
    """读写、复制、重命名或删除失败"""
    pass


class InvalidProjectLayout(BuildError):
    """项目目录结构不正确（例如缺少 main.lua）"""
    pass


class MetadataRewriteError(BuildError):
    """Info.plist 内容与预期结构不符"""
    pass
