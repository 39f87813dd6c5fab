"""
构建管道模块

使用管道模式协调构建步骤的执行：
检查项目 -> 构建 .love（一次）-> 逐个平台融合 -> 汇总统计。
任意步骤失败即中止，不再尝试剩余目标。
"""

import time
from typing import List, Optional, TYPE_CHECKING

from ..utils import format_duration
from ..utils.logging import info, success, debug, error, LogStage
from .build_context import BuildContext, BuildError, ProgressCallback
from .models import BuildSettings, LoveVersion, Project, expand_targets
from .steps.build_step import BuildStep
from .steps.project_check_step import ProjectCheckStep
from .steps.love_archive_step import LoveArchiveStep
from .steps.platform_step import PlatformFuseStep

if TYPE_CHECKING:
    from ..runtime.cache import RuntimeCache

# 平台步骤共享的进度区间
_PLATFORM_PROGRESS = (30, 100)


class BuildPipeline:
    """构建管道，负责协调构建步骤的执行"""

    def __init__(self, build_settings: BuildSettings):
        """初始化构建管道

        Args:
            build_settings: 构建设置，决定要执行哪些平台步骤
        """
        self.build_settings = build_settings
        self._steps: List[BuildStep] = []
        self._init_default_steps()

    def _init_default_steps(self):
        """根据目标初始化构建步骤"""
        builds = expand_targets(self.build_settings.targets)

        self._steps = [ProjectCheckStep(), LoveArchiveStep()]
        if not builds:
            # 只构建 .love 时由归档步骤收尾
            self._steps[-1].set_progress_range(5, 100)
            return

        start, end = _PLATFORM_PROGRESS
        width = (end - start) // len(builds)
        for index, (platform, bitness) in enumerate(builds):
            step_start = start + index * width
            step_end = end if index == len(builds) - 1 else step_start + width
            self._steps.append(PlatformFuseStep(platform, bitness, (step_start, step_end)))

    def get_steps(self) -> List[BuildStep]:
        """获取所有构建步骤"""
        return self._steps.copy()

    def execute(
        self,
        project: Project,
        version: LoveVersion,
        runtime_cache: "RuntimeCache",
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BuildContext:
        """执行构建管道

        Args:
            project: 项目信息
            version: LÖVE 版本
            runtime_cache: 运行时缓存
            progress_callback: 进度回调函数

        Returns:
            BuildContext: 构建上下文，statistics 中是各步骤的统计信息

        Raises:
            BuildError: 构建失败（保持具体的错误类型）
        """
        errors = self.validate_pipeline()
        if errors:
            for message in errors:
                error(message, stage=LogStage.BUILD)
            raise BuildError(f"构建管道无效: {errors[0]}")

        context = BuildContext(
            project=project,
            build_settings=self.build_settings,
            version=version,
            runtime_cache=runtime_cache,
            progress_callback=progress_callback,
        )

        start = time.perf_counter()
        info(f"开始构建 `{project.title}`，目录 `{project.directory}`", stage=LogStage.BUILD)
        debug(
            f"构建配置: version={version.value} targets={sorted(t.value for t in self.build_settings.targets)} "
            f"ignore={len(self.build_settings.ignore_list)}",
            stage=LogStage.BUILD,
        )

        try:
            for step in self.get_steps():
                info(f"执行步骤: {step.description}", stage=LogStage.BUILD)
                step.execute(context)
        except BuildError as e:
            error(f"构建失败: {e}", stage=LogStage.BUILD)
            raise
        except Exception as e:
            error(f"构建失败: {e}", stage=LogStage.BUILD)
            raise BuildError(f"构建失败: {e}") from e

        success(f"构建成功，共 {len(context.statistics)} 个产物", stage=LogStage.DONE)
        info(f"构建时间: {format_duration(time.perf_counter() - start)}")
        return context

    def validate_pipeline(self) -> List[str]:
        """验证构建管道的完整性

        Returns:
            List[str]: 验证错误列表，空列表表示验证通过
        """
        errors = []

        if not self._steps:
            errors.append("构建管道中没有步骤")
            return errors

        # 检查步骤的进度范围是否连续
        prev_end = 0
        for step in self._steps:
            start, end = step.get_progress_range()
            if start != prev_end:
                errors.append(f"步骤 '{step.name}' 的进度范围不连续: 期望起始 {prev_end}%, 实际 {start}%")
            if start >= end:
                errors.append(f"步骤 '{step.name}' 的进度范围无效: {start}% - {end}%")
            prev_end = end

        if prev_end != 100:
            errors.append(f"构建管道的总进度范围不是100%: {prev_end}%")

        return errors
