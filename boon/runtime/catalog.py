"""
LÖVE 运行时目录表

(版本, 平台, 架构) -> 发布包信息的查找表。新增版本只需要在表里加一行。
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..build.build_context import UnsupportedTargetError
from ..build.models import Bitness, LoveVersion, Platform

RELEASE_BASE_URL = "https://github.com/love2d/love/releases/download"


@dataclass(frozen=True)
class RuntimeRelease:
    """一个官方发布包"""
    version: LoveVersion
    platform: Platform
    bitness: Bitness
    archive_name: str  # 下载的压缩包文件名
    directory_name: str  # 解压后的运行时目录名

    @property
    def url(self) -> str:
        return f"{RELEASE_BASE_URL}/{self.version.value}/{self.archive_name}"


def _release(version: LoveVersion, platform: Platform, bitness: Bitness,
             archive_name: str, directory_name: str) -> Tuple[Tuple[LoveVersion, Platform, Bitness], RuntimeRelease]:
    return (version, platform, bitness), RuntimeRelease(version, platform, bitness, archive_name, directory_name)


V = LoveVersion
W, M = Platform.WINDOWS, Platform.MACOS
X86, X64 = Bitness.X86, Bitness.X64

RUNTIME_RELEASES: Dict[Tuple[LoveVersion, Platform, Bitness], RuntimeRelease] = dict([
    _release(V.V11_3, W, X64, "love-11.3-win64.zip", "love-11.3-win64"),
    _release(V.V11_3, W, X86, "love-11.3-win32.zip", "love-11.3-win32"),
    _release(V.V11_3, M, X64, "love-11.3-macos.zip", "love.app"),

    _release(V.V11_2, W, X64, "love-11.2-win64.zip", "love-11.2.0-win64"),
    _release(V.V11_2, W, X86, "love-11.2-win32.zip", "love-11.2.0-win32"),
    _release(V.V11_2, M, X64, "love-11.2-macos.zip", "love.app"),

    _release(V.V11_1, W, X64, "love-11.1-win64.zip", "love-11.1.0-win64"),
    _release(V.V11_1, W, X86, "love-11.1-win32.zip", "love-11.1.0-win32"),
    _release(V.V11_1, M, X64, "love-11.1-macos.zip", "love.app"),

    _release(V.V11_0, W, X64, "love-11.0.0-win64.zip", "love-11.0.0-win64"),
    _release(V.V11_0, W, X86, "love-11.0.0-win32.zip", "love-11.0.0-win32"),
    _release(V.V11_0, M, X64, "love-11.0.0-macos.zip", "love.app"),

    _release(V.V0_10_2, W, X64, "love-0.10.2-win64.zip", "love-0.10.2-win64"),
    _release(V.V0_10_2, W, X86, "love-0.10.2-win32.zip", "love-0.10.2-win32"),
    _release(V.V0_10_2, M, X64, "love-0.10.2-macosx-x64.zip", "love.app"),
])

del V, W, M, X86, X64


def get_release(version: LoveVersion, platform: Platform, bitness: Bitness) -> RuntimeRelease:
    """查找发布包

    Raises:
        UnsupportedTargetError: 组合不在目录表中
    """
    try:
        return RUNTIME_RELEASES[(version, platform, bitness)]
    except KeyError:
        raise UnsupportedTargetError(
            f"不支持的组合: LÖVE {version.value} {platform.display_name} {bitness.value}"
        ) from None


def releases_for_version(version: LoveVersion) -> List[RuntimeRelease]:
    """某个版本的全部发布包（按表中顺序）"""
    return [release for key, release in RUNTIME_RELEASES.items() if key[0] == version]
