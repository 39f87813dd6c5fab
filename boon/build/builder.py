"""
构建器主类

负责整个构建流程的协调，对外提供统一的构建接口。
"""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from .build_context import BuildError, ProgressCallback
from .build_pipeline import BuildPipeline
from .models import BuildSettings, BuildStatistics, DEFAULT_LOVE_VERSION, LoveVersion, Project

if TYPE_CHECKING:
    from ..runtime.cache import RuntimeCache


@dataclass
class BuildResult:
    """构建结果"""
    success: bool
    statistics: List[BuildStatistics] = field(default_factory=list)
    error: Optional[BuildError] = None

    @property
    def total_time(self) -> float:
        return sum(s.time for s in self.statistics)


class Builder:
    """LÖVE 游戏构建器"""

    def __init__(self, runtime_cache: Optional["RuntimeCache"] = None):
        """初始化构建器

        Args:
            runtime_cache: 运行时缓存，默认使用用户数据目录
        """
        if runtime_cache is None:
            from ..runtime.cache import RuntimeCache
            runtime_cache = RuntimeCache()
        self.runtime_cache = runtime_cache

    def build(
        self,
        project: Project,
        build_settings: BuildSettings,
        version: LoveVersion = DEFAULT_LOVE_VERSION,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BuildResult:
        """构建项目

        Args:
            project: 项目信息
            build_settings: 构建设置
            version: LÖVE 版本
            progress_callback: 进度回调函数

        Returns:
            BuildResult: 构建结果，失败时 error 为具体的 BuildError
        """
        pipeline = self.create_pipeline(build_settings)
        try:
            context = pipeline.execute(project, version, self.runtime_cache, progress_callback)
        except BuildError as e:
            return BuildResult(success=False, error=e)

        return BuildResult(success=True, statistics=list(context.statistics))

    def create_pipeline(self, build_settings: BuildSettings) -> BuildPipeline:
        """创建构建管道，可用于自定义构建流程"""
        return BuildPipeline(build_settings)
