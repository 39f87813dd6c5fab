"""
运行时缓存

管理本地缓存的 LÖVE 运行时：解析路径、列出和删除已安装版本。
目录布局: <数据目录>/<版本>/<运行时目录名>
"""

from pathlib import Path
from typing import List, Optional

from ..build.build_context import FileSystemError
from ..build.models import Bitness, LoveVersion, Platform, RuntimeLocation
from ..utils.logging import info, LogStage
from ..utils.paths import get_data_dir, remove_path
from .catalog import get_release


class RuntimeCache:
    """LÖVE 运行时缓存"""

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else get_data_dir()

    def version_dir(self, version: LoveVersion) -> Path:
        return self.root / version.value

    def locate(self, version: LoveVersion, platform: Platform, bitness: Bitness) -> RuntimeLocation:
        """解析运行时路径（不检查是否存在）

        Raises:
            UnsupportedTargetError: 组合不受支持
        """
        release = get_release(version, platform, bitness)
        return RuntimeLocation(
            path=self.version_dir(version) / release.directory_name,
            version=version,
            platform=platform,
            bitness=bitness,
        )

    def installed_versions(self) -> List[LoveVersion]:
        """已安装的版本

        只认可能解析为有效版本号的目录，忽略其他杂项目录。
        """
        if not self.root.is_dir():
            return []

        versions = []
        for entry in sorted(self.root.iterdir()):
            if not entry.is_dir():
                continue
            try:
                versions.append(LoveVersion(entry.name))
            except ValueError:
                continue
        return versions

    def is_installed(self, version: LoveVersion) -> bool:
        return version in self.installed_versions()

    def remove(self, version: LoveVersion) -> bool:
        """删除某个版本的缓存

        Returns:
            bool: 是否确实删除了内容

        Raises:
            FileSystemError: 删除失败
        """
        path = self.version_dir(version)
        if not path.exists():
            return False

        try:
            remove_path(path)
        except OSError as e:
            raise FileSystemError(f"无法删除 {path}: {e}") from e

        info(f"已删除 LÖVE {version.value}", stage=LogStage.RUNTIME)
        return True
