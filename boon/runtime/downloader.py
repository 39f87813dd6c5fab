"""
运行时下载器

从官方发布地址下载 LÖVE 压缩包到缓存目录并解压。
已存在的压缩包不会重复下载。
"""

import os
import stat
import sys
import zipfile
from pathlib import Path
from typing import Callable, List, Optional

import requests

from ..build.models import LoveVersion
from ..utils import ensure_directory, format_size
from ..utils.logging import info, success, warning, debug, LogStage
from ..utils.paths import discard_path
from .cache import RuntimeCache
from .catalog import RuntimeRelease, releases_for_version

CHUNK_SIZE = 64 * 1024
DEFAULT_TIMEOUT = 60

# 下载进度回调: (已下载字节, 总字节或 0)
DownloadProgress = Callable[[int, int], None]


class DownloadError(Exception):
    """下载或解压失败"""
    pass


class RuntimeDownloader:
    """LÖVE 运行时下载器"""

    def __init__(self, cache: RuntimeCache, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.cache = cache
        self.session = session or requests.Session()
        self.timeout = timeout

    def download_version(self, version: LoveVersion,
                         progress_callback: Optional[DownloadProgress] = None) -> List[Path]:
        """下载并解压某个版本的全部平台运行时

        Returns:
            List[Path]: 解压后的运行时目录
        """
        return [self.install(release, progress_callback) for release in releases_for_version(version)]

    def install(self, release: RuntimeRelease,
                progress_callback: Optional[DownloadProgress] = None) -> Path:
        """下载（如需要）并解压单个发布包

        Returns:
            Path: 解压后的运行时目录

        Raises:
            DownloadError: 下载或解压失败
        """
        version_dir = ensure_directory(self.cache.version_dir(release.version))
        archive_path = version_dir / release.archive_name

        if archive_path.exists():
            info(f"文件已存在: {archive_path}", stage=LogStage.DOWNLOAD)
        else:
            self.fetch(release.url, archive_path, progress_callback)

        info(f"解压 {archive_path}", stage=LogStage.DOWNLOAD)
        extract_archive(archive_path, version_dir)

        runtime_dir = version_dir / release.directory_name
        if not runtime_dir.exists():
            raise DownloadError(f"解压后未找到运行时目录: {runtime_dir}")

        success(f"LÖVE {release.version.value} {release.platform.display_name} {release.bitness.value} 已就绪",
                stage=LogStage.DOWNLOAD)
        return runtime_dir

    def fetch(self, url: str, destination: Path,
              progress_callback: Optional[DownloadProgress] = None) -> int:
        """流式下载到文件

        先写入 .part 临时文件，完成后再重命名，中断不会留下看似完整的压缩包。

        Returns:
            int: 下载的字节数
        """
        info(f"下载 '{url}'", stage=LogStage.DOWNLOAD)
        partial = destination.with_name(destination.name + ".part")
        downloaded = 0

        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                total = int(resp.headers.get("content-length") or 0)
                with open(partial, 'wb') as f:
                    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                        if not chunk:
                            continue
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress_callback:
                            progress_callback(downloaded, total)
            os.replace(partial, destination)
        except requests.RequestException as e:
            discard_path(partial)
            raise DownloadError(f"无法下载 '{url}': {e}") from e
        except OSError as e:
            discard_path(partial)
            raise DownloadError(f"无法写入 '{destination}': {e}") from e

        debug(f"下载完成 {destination.name}: {format_size(downloaded)}", stage=LogStage.DOWNLOAD)
        return downloaded


def extract_archive(archive_path: Path, output_dir: Path) -> int:
    """解压 Zip 到目录，恢复 Unix 权限和符号链接

    Args:
        archive_path: 压缩包路径
        output_dir: 输出目录

    Returns:
        int: 解压的条目数

    Raises:
        DownloadError: 压缩包损坏或写入失败
    """
    output_dir = Path(output_dir)
    count = 0

    try:
        with zipfile.ZipFile(archive_path, 'r') as zf:
            for zinfo in zf.infolist():
                # 安全检查：防止目录穿越
                name = zinfo.filename
                if name.startswith('/') or '..' in Path(name).parts:
                    warning(f"跳过不安全的条目: {name}", stage=LogStage.DOWNLOAD)
                    continue

                target = output_dir / name
                mode = zinfo.external_attr >> 16

                if zinfo.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                elif stat.S_ISLNK(mode) and sys.platform != "win32":
                    # macOS 应用包中的 framework 依赖符号链接
                    target.parent.mkdir(parents=True, exist_ok=True)
                    link_target = zf.read(zinfo).decode('utf-8')
                    if target.is_symlink() or target.exists():
                        target.unlink()
                    os.symlink(link_target, target)
                else:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(zinfo) as src, open(target, 'wb') as dst:
                        while True:
                            chunk = src.read(CHUNK_SIZE)
                            if not chunk:
                                break
                            dst.write(chunk)

                    if mode and sys.platform != "win32":
                        os.chmod(target, stat.S_IMODE(mode))
                count += 1
    except zipfile.BadZipFile as e:
        raise DownloadError(f"压缩包已损坏: {archive_path}: {e}") from e
    except OSError as e:
        raise DownloadError(f"解压 {archive_path} 失败: {e}") from e

    return count


def download_love(version: LoveVersion, cache: Optional[RuntimeCache] = None,
                  progress_callback: Optional[DownloadProgress] = None) -> List[Path]:
    """便捷函数：下载某个版本的全部平台运行时"""
    downloader = RuntimeDownloader(cache or RuntimeCache())
    return downloader.download_version(version, progress_callback)
