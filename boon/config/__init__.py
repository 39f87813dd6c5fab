"""配置模块

提供 Boon.yaml 的加载、合并和验证功能。
"""

from .defaults import CONFIG_FILE_NAME, DEFAULT_CONFIG
from .schema import BoonConfig, BuildModel, ProjectModel
from .loader import (
    ConfigLoader,
    ConfigValidationError,
    ConfigError,
    load_config,
    init_config,
    config_loader,
)

__all__ = [
    # 主要类
    "BoonConfig",
    "BuildModel",
    "ProjectModel",
    "ConfigLoader",

    # 异常类
    "ConfigError",
    "ConfigValidationError",

    # 便捷函数
    "load_config",
    "init_config",

    # 常量与单例
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG",
    "config_loader",
]
