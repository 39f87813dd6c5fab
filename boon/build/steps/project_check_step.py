"""
项目检查步骤模块

检查项目目录结构并确保发布目录存在。
"""

from pathlib import Path

from ...utils.logging import info, success, error, LogStage
from boon.build.build_context import BuildContext, FileSystemError, InvalidProjectLayout
from .build_step import BuildStep

ENTRY_POINT = "main.lua"


class ProjectCheckStep(BuildStep):
    """项目检查步骤"""

    def __init__(self, progress_range=(0, 5)):
        super().__init__("check", "检查项目目录", progress_range)

    def execute(self, context: BuildContext) -> None:
        """检查 main.lua 并创建发布目录"""
        project = context.project
        info(f"检查项目 {project.directory}", stage=LogStage.INIT)
        context.report("检查项目", self.get_progress_range()[0], str(project.directory))

        main_lua = Path(project.directory) / ENTRY_POINT
        if not main_lua.is_file():
            error(f"项目根目录中没有找到 {ENTRY_POINT}", stage=LogStage.INIT)
            raise InvalidProjectLayout(f"项目根目录中没有找到 {ENTRY_POINT}: {project.directory}")

        release_path = project.get_release_path(context.build_settings)
        if not release_path.exists():
            info(f"创建发布目录 {release_path}", stage=LogStage.INIT)
            try:
                release_path.mkdir(parents=True)
            except OSError as e:
                raise FileSystemError(f"无法创建发布目录 `{release_path}`: {e}") from e

        context.release_path = release_path
        context.report("检查项目", self.get_progress_range()[1], "完成")
        success("项目检查通过", stage=LogStage.INIT)
