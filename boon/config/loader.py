"""
配置加载器

加载内置默认配置，再合并项目目录下的 Boon.yaml 并进行验证。
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..utils.logging import info, debug, LogStage
from .defaults import CONFIG_FILE_NAME, DEFAULT_CONFIG
from .schema import BoonConfig


class ConfigError(Exception):
    """配置错误基类"""
    pass


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def __init__(self, message: str, errors: List[Dict[str, Any]]):
        super().__init__(message)
        self.errors = errors

    def format_errors(self) -> str:
        """格式化错误信息为人类可读的格式"""
        formatted = []
        for error in self.errors:
            loc = " -> ".join(str(item) for item in error.get('loc', []))
            msg = error.get('msg', '未知错误')
            input_val = error.get('input', '')

            if loc:
                formatted.append(f"字段 '{loc}': {msg}")
                if input_val:
                    formatted.append(f"  输入值: {input_val}")
            else:
                formatted.append(f"根级别: {msg}")

        return "\n".join(formatted)


class ConfigLoader:
    """配置加载器"""

    def __init__(self):
        self.yaml = YAML(typ='safe', pure=True)

    def parse(self, text: str, source: str = "<string>") -> Dict[str, Any]:
        """解析 YAML 文本为字典

        Raises:
            ConfigError: YAML 语法错误或根级别不是字典
        """
        try:
            data = self.yaml.load(text)
        except YAMLError as e:
            raise ConfigError(f"YAML 解析错误 ({source}): {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"配置文件根级别必须是对象/字典格式: {source}")
        return data

    def default_data(self) -> Dict[str, Any]:
        """内置默认配置"""
        return self.parse(DEFAULT_CONFIG, "默认配置")

    def load_file_data(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """读取配置文件为字典

        Raises:
            ConfigError: 文件不存在、读取失败或格式错误
        """
        config_path = Path(config_path)
        if not config_path.is_file():
            raise ConfigError(f"配置文件不存在: {config_path}")

        try:
            text = config_path.read_text(encoding='utf-8')
        except OSError as e:
            raise ConfigError(f"文件读取错误: {e}")
        return self.parse(text, str(config_path))

    def merge(self, defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """把项目配置合并到默认配置上

        ignore_list 默认与内置列表合并；exclude_default_ignore_list 为 true 时
        只使用项目自己的列表。
        """
        merged = copy.deepcopy(defaults)

        for section, values in overrides.items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values

        build = merged.get('build')
        override_build = overrides.get('build')
        if isinstance(build, dict) and isinstance(override_build, dict):
            default_list = defaults.get('build', {}).get('ignore_list') or []
            project_list = override_build.get('ignore_list') or []
            if build.get('exclude_default_ignore_list'):
                build['ignore_list'] = list(project_list)
            else:
                build['ignore_list'] = list(default_list) + [p for p in project_list if p not in default_list]

        return merged

    def validate(self, data: Dict[str, Any]) -> BoonConfig:
        """使用 Pydantic 验证

        Raises:
            ConfigValidationError: 验证失败
        """
        try:
            return BoonConfig.from_dict(data)
        except ValidationError as e:
            raise ConfigValidationError("配置验证失败", [error for error in e.errors()])

    def load_project(self, project_dir: Union[str, Path]) -> BoonConfig:
        """加载项目配置

        项目目录中没有 Boon.yaml 时只使用默认配置。

        Args:
            project_dir: 项目目录

        Returns:
            BoonConfig: 验证后的配置

        Raises:
            ConfigError: 配置加载或验证错误
        """
        data = self.default_data()
        config_path = Path(project_dir) / CONFIG_FILE_NAME

        if config_path.exists():
            debug(f"读取配置文件 {config_path}", stage=LogStage.CONFIG)
            data = self.merge(data, self.load_file_data(config_path))
        else:
            debug(f"{config_path} 不存在，使用默认配置", stage=LogStage.CONFIG)

        return self.validate(data)

    def init_project(self, project_dir: Union[str, Path]) -> Optional[Path]:
        """在项目目录写入默认配置文件

        Returns:
            Optional[Path]: 写入的文件路径，已存在时返回 None

        Raises:
            ConfigError: 写入失败
        """
        config_path = Path(project_dir) / CONFIG_FILE_NAME
        if config_path.exists():
            return None

        try:
            config_path.write_text(DEFAULT_CONFIG, encoding='utf-8')
        except OSError as e:
            raise ConfigError(f"无法创建配置文件 {config_path}: {e}")

        info(f"已创建 {config_path}", stage=LogStage.CONFIG)
        return config_path


# 全局加载器实例
config_loader = ConfigLoader()


def load_config(project_dir: Union[str, Path]) -> BoonConfig:
    """便捷函数：加载项目配置"""
    return config_loader.load_project(project_dir)


def init_config(project_dir: Union[str, Path]) -> Optional[Path]:
    """便捷函数：写入默认配置文件"""
    return config_loader.init_project(project_dir)
