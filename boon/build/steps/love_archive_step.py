"""
.love 归档步骤模块

把项目目录打包成 .love 文件，每次构建只执行一次。
"""

from typing import Optional

from ...utils.logging import info, LogStage
from boon.build.archiver import create_love_archive
from boon.build.build_context import BuildContext, BuildError
from .build_step import BuildStep


class LoveArchiveStep(BuildStep):
    """.love 归档步骤"""

    def __init__(self, progress_range=(5, 30)):
        super().__init__("love", "构建 .love 文件", progress_range)

    def execute(self, context: BuildContext) -> None:
        """构建 .love 并把路径记录到上下文"""
        if context.release_path is None:
            raise BuildError("发布目录尚未准备好")

        progress_start, progress_end = self.get_progress_range()
        span = progress_end - progress_start

        def archive_progress(current: int, total: int, current_file: Optional[str] = None) -> None:
            if total > 0:
                message = f"打包: {current_file}" if current_file else "打包中..."
                context.report("构建 .love", progress_start + int(current / total * span), message)

        info("构建 .love 文件", stage=LogStage.ARCHIVE)
        love_path, stats = create_love_archive(context.project, context.build_settings, archive_progress)

        context.love_file = love_path
        context.statistics.append(stats)
        context.report("构建 .love", progress_end, love_path.name)
