"""
Boon - LÖVE 游戏构建与发布工具

A build and deploy tool for LÖVE games.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .build.builder import Builder, BuildResult
from .config.schema import BoonConfig

__all__ = ["BoonConfig", "Builder", "BuildResult", "__version__"]
