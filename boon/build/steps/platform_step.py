"""
平台构建步骤模块

把 .love 与对应平台的 LÖVE 运行时融合。
"""

from boon.build.build_context import BuildContext, BuildError
from boon.build.macos import create_macos_artifact
from boon.build.models import Bitness, Platform
from boon.build.windows import create_windows_artifact
from .build_step import BuildStep

_FUSERS = {
    Platform.WINDOWS: create_windows_artifact,
    Platform.MACOS: create_macos_artifact,
}


class PlatformFuseStep(BuildStep):
    """平台构建步骤"""

    def __init__(self, platform: Platform, bitness: Bitness, progress_range=(30, 100)):
        super().__init__(
            f"{platform.value}-{bitness.value}",
            f"构建 {platform.display_name} {bitness.value}",
            progress_range,
        )
        self.platform = platform
        self.bitness = bitness

    def execute(self, context: BuildContext) -> None:
        """融合运行时，统计信息追加到上下文"""
        # .love 必须先构建完成，由前面的步骤显式传入
        if context.love_file is None:
            raise BuildError(f"{self.description} 需要先构建 .love 文件")

        progress_start, progress_end = self.get_progress_range()
        context.report(self.description, progress_start, "开始...")

        fuser = _FUSERS[self.platform]
        stats = fuser(
            context.project,
            context.build_settings,
            context.version,
            self.bitness,
            context.love_file,
            context.runtime_cache,
        )

        context.statistics.append(stats)
        context.report(self.description, progress_end, stats.file_name)
