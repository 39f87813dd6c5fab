"""
构建数据模型

项目描述、构建设置、目标平台和构建统计等值类型。
这些对象在一次构建中只读，由配置层创建后传入构建管道。
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Iterable, List, Tuple


class Platform(str, Enum):
    """目标操作系统"""
    WINDOWS = "windows"
    MACOS = "macos"

    @property
    def display_name(self) -> str:
        return "Windows" if self is Platform.WINDOWS else "macOS"


class Bitness(str, Enum):
    """CPU 架构"""
    X86 = "x86"
    X64 = "x64"


class LoveVersion(str, Enum):
    """支持的 LÖVE 版本"""
    V11_3 = "11.3"
    V11_2 = "11.2"
    V11_1 = "11.1"
    V11_0 = "11.0"
    V0_10_2 = "0.10.2"

    @classmethod
    def parse(cls, value: str) -> "LoveVersion":
        """从字符串解析版本

        Raises:
            ValueError: 不是受支持的版本
        """
        try:
            return cls(value)
        except ValueError:
            supported = ", ".join(v.value for v in cls)
            raise ValueError(f"{value} 不是有效的 LÖVE 版本（支持: {supported}）") from None


DEFAULT_LOVE_VERSION = LoveVersion.V11_3


class Target(str, Enum):
    """构建目标"""
    LOVE = "love"
    WINDOWS = "windows"
    MACOS = "macos"
    ALL = "all"


# 每个目标对应的 (平台, 架构) 组合，按构建顺序排列
_TARGET_BUILDS = {
    Target.LOVE: (),
    Target.WINDOWS: ((Platform.WINDOWS, Bitness.X86), (Platform.WINDOWS, Bitness.X64)),
    Target.MACOS: ((Platform.MACOS, Bitness.X64),),
}


def expand_targets(targets: Iterable[Target]) -> List[Tuple[Platform, Bitness]]:
    """把构建目标展开为去重且有序的 (平台, 架构) 列表

    .love 归档总会构建，因此 Target.LOVE 不产生平台构建。
    """
    requested = set(targets)
    if Target.ALL in requested:
        requested = {Target.WINDOWS, Target.MACOS}

    builds: List[Tuple[Platform, Bitness]] = []
    for target in (Target.WINDOWS, Target.MACOS):
        if target in requested:
            builds.extend(_TARGET_BUILDS[target])
    return builds


@dataclass(frozen=True)
class Project:
    """待打包的游戏项目"""
    title: str  # 例如 "My Super Awesome Game"
    package_name: str  # 例如 "super_game"
    directory: Path
    uti: str  # Uniform Type Identifier，例如 "org.love2d.love"

    authors: str = ""
    description: str = ""
    email: str = ""
    url: str = ""
    version: str = ""

    def get_release_path(self, build_settings: "BuildSettings") -> Path:
        """发布目录的绝对路径（项目目录下的 output_directory）"""
        return Path(self.directory).resolve() / build_settings.output_directory

    @property
    def love_file_name(self) -> str:
        """.love 文件名（所有平台相同）"""
        return f"{self.title}.love"


@dataclass(frozen=True)
class BuildSettings:
    """构建设置"""
    output_directory: str = "release"
    ignore_list: FrozenSet[str] = field(default_factory=frozenset)
    exclude_default_ignore_list: bool = False
    targets: FrozenSet[Target] = field(default_factory=lambda: frozenset({Target.LOVE}))


@dataclass(frozen=True)
class RuntimeLocation:
    """已解析的 LÖVE 运行时缓存位置"""
    path: Path
    version: LoveVersion
    platform: Platform
    bitness: Bitness

    def exists(self) -> bool:
        return self.path.exists()


@dataclass(frozen=True)
class BuildStatistics:
    """单个构建产物的统计信息"""
    name: str  # 构建名称，例如 "Windows x64"
    file_name: str  # 产物文件名
    time: float  # 耗时（秒）
    size: int  # 产物大小（字节）
