"""构建步骤"""

from .build_step import BuildStep
from .project_check_step import ProjectCheckStep
from .love_archive_step import LoveArchiveStep
from .platform_step import PlatformFuseStep

__all__ = [
    "BuildStep",
    "ProjectCheckStep",
    "LoveArchiveStep",
    "PlatformFuseStep",
]
