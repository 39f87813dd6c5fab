"""
构建步骤基类模块

定义构建步骤的抽象接口和基础功能。
"""

from abc import ABC, abstractmethod
from typing import Tuple

from boon.build.build_context import BuildContext


class BuildStep(ABC):
    """构建步骤抽象基类"""

    def __init__(self, name: str, description: str, progress_range: Tuple[int, int] = (0, 100)):
        self.name = name
        self.description = description
        self._progress_range = progress_range

    @abstractmethod
    def execute(self, context: BuildContext) -> None:
        """执行构建步骤"""
        pass

    def get_progress_range(self) -> Tuple[int, int]:
        """获取此步骤的进度范围 (start_percent, end_percent)"""
        return self._progress_range

    def set_progress_range(self, start: int, end: int) -> None:
        self._progress_range = (start, end)
