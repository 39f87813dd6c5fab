"""
配置 Schema 定义

使用 Pydantic 定义 Boon.yaml 的配置模型，并转换为构建层使用的数据对象。
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Union

from pydantic import BaseModel, Field, field_validator

from ..build.models import BuildSettings, Project, Target


class ProjectModel(BaseModel):
    """项目信息模型"""
    title: str = Field(..., description="游戏标题", min_length=1, max_length=200)
    package_name: str = Field(..., description="可执行文件基础名", min_length=1, max_length=100)
    uti: str = Field(..., description="Uniform Type Identifier，例如 com.example.game", min_length=1)
    authors: str = Field("", description="作者")
    description: str = Field("", description="描述")
    email: str = Field("", description="联系邮箱")
    url: str = Field("", description="主页")
    version: str = Field("", description="游戏版本")

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

    @field_validator('title', 'package_name')
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """标题和包名会被用作文件名"""
        if any(ch in v for ch in '<>:"/\\|?*'):
            raise ValueError("不能包含文件名非法字符 <>:\"/\\|?*")
        return v

    @field_validator('uti')
    @classmethod
    def validate_uti(cls, v: str) -> str:
        """验证反向域名格式"""
        if not re.match(r'^[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+$', v):
            raise ValueError("UTI 必须是反向域名格式，例如 com.example.game")
        return v


class BuildModel(BaseModel):
    """构建配置模型"""
    output_directory: str = Field("release", description="发布目录（相对于项目目录）", min_length=1)
    ignore_list: List[str] = Field(default_factory=list, description="排除规则（正则表达式）")
    exclude_default_ignore_list: bool = Field(False, description="是否替换而不是合并默认排除列表")

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

    @field_validator('output_directory')
    @classmethod
    def validate_output_directory(cls, v: str) -> str:
        path = Path(v)
        if path.is_absolute() or any(p == ".." for p in path.parts):
            raise ValueError("发布目录必须是项目目录内的相对路径")
        if not path.parts:
            raise ValueError("发布目录不能是项目目录本身")
        return v

    @field_validator('ignore_list')
    @classmethod
    def validate_ignore_list(cls, v: List[str]) -> List[str]:
        """排除规则必须是合法的正则表达式，去重保序"""
        cleaned: List[str] = []
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"无效的正则表达式 '{pattern}': {e}")
            if pattern not in cleaned:
                cleaned.append(pattern)
        return cleaned


class BoonConfig(BaseModel):
    """Boon 主配置模型"""
    project: ProjectModel = Field(..., description="项目信息")
    build: BuildModel = Field(default_factory=BuildModel, description="构建配置")

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
    }

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BoonConfig':
        """从字典创建配置实例"""
        return cls.model_validate(data)

    def to_project(self, directory: Union[str, Path]) -> Project:
        """生成构建用的项目描述"""
        p = self.project
        return Project(
            title=p.title,
            package_name=p.package_name,
            directory=Path(directory),
            uti=p.uti,
            authors=p.authors,
            description=p.description,
            email=p.email,
            url=p.url,
            version=p.version,
        )

    def to_build_settings(self, targets: Iterable[Target] = (Target.LOVE,)) -> BuildSettings:
        """生成构建设置"""
        target_set: FrozenSet[Target] = frozenset(targets) or frozenset({Target.LOVE})
        return BuildSettings(
            output_directory=self.build.output_directory,
            ignore_list=frozenset(self.build.ignore_list),
            exclude_default_ignore_list=self.build.exclude_default_ignore_list,
            targets=target_set,
        )
