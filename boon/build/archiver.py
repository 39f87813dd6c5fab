"""
归档构建器

把收集到的文件写入确定性的 deflate Zip 归档（.love 文件和 Windows 发布包都用它）。
"""

import os
import re
import time
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import BinaryIO, Iterable, List, Optional, Protocol, Tuple

from ..utils import format_size
from ..utils.logging import info, success, debug, error, LogStage
from ..utils.paths import discard_path
from .build_context import BuildError, FileSystemError
from .collector import ExclusionFilter, FileCollector, FileInfo
from .models import BuildSettings, BuildStatistics, Project

# 归档条目统一使用的 Unix 权限
ENTRY_MODE = 0o644
# 复用的读缓冲大小
CHUNK_SIZE = 64 * 1024
# Zip 时间戳最早只能是 1980-01-01
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


class ProgressCallback(Protocol):
    """进度回调协议"""

    def __call__(self, current: int, total: int, current_file: Optional[str] = None) -> None:
        ...


@dataclass(frozen=True)
class ArchiveResult:
    """归档结果"""
    path: Path
    entry_count: int
    size: int  # 关闭后磁盘上的实际大小
    time: float  # 耗时（秒）


def _zip_timestamp(mtime: float) -> Tuple[int, int, int, int, int, int]:
    stamp = time.localtime(mtime)[:6]
    return max(stamp, _ZIP_EPOCH)


def _make_zip_info(file_info: FileInfo) -> zipfile.ZipInfo:
    zinfo = zipfile.ZipInfo(file_info.relative_path, date_time=_zip_timestamp(file_info.mtime))
    zinfo.compress_type = zipfile.ZIP_DEFLATED
    zinfo.create_system = 3  # Unix，使权限位生效
    zinfo.external_attr = (0o100000 | ENTRY_MODE) << 16
    zinfo.file_size = file_info.size
    return zinfo


class ArchiveWriter:
    """流式 Zip 写入器

    文件内容通过一个复用的内存缓冲写入，内存占用与归档总大小无关。
    """

    def __init__(self, compresslevel: Optional[int] = None):
        self.compresslevel = compresslevel
        self._buffer = bytearray(CHUNK_SIZE)

    def write_files(
        self,
        files: List[FileInfo],
        output_stream: BinaryIO,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> int:
        """把文件写入 Zip 流

        Args:
            files: 要写入的文件列表
            output_stream: 输出流
            progress_callback: 进度回调

        Returns:
            int: 写入的条目数

        Raises:
            OSError: 读取源文件或写入输出失败
        """
        total_bytes = sum(f.size for f in files)
        processed_bytes = 0
        view = memoryview(self._buffer)

        with zipfile.ZipFile(output_stream, 'w', zipfile.ZIP_DEFLATED,
                             compresslevel=self.compresslevel) as zf:
            for file_info in files:
                if progress_callback:
                    progress_callback(processed_bytes, total_bytes, file_info.relative_path)

                zinfo = _make_zip_info(file_info)
                with open(file_info.path, 'rb') as src, zf.open(zinfo, 'w') as dst:
                    while True:
                        n = src.readinto(self._buffer)
                        if not n:
                            break
                        dst.write(view[:n])

                processed_bytes += file_info.size

        if progress_callback:
            progress_callback(total_bytes, total_bytes, None)
        return len(files)


def _write_archive(
    files: List[FileInfo],
    destination_file: Path,
    start: float,
    progress_callback: Optional[ProgressCallback] = None,
) -> ArchiveResult:
    destination_file = Path(destination_file)
    writer = ArchiveWriter()

    try:
        with open(destination_file, 'wb') as f:
            entry_count = writer.write_files(files, f, progress_callback)
    except OSError as e:
        # 写了一半的归档不可用，直接删除
        discard_path(destination_file)
        raise FileSystemError(f"写入归档 {destination_file} 失败: {e}") from e
    except BaseException:
        discard_path(destination_file)
        raise

    return ArchiveResult(
        path=destination_file,
        entry_count=entry_count,
        size=destination_file.stat().st_size,
        time=time.perf_counter() - start,
    )


def build_archive(
    source_dir: Path,
    destination_file: Path,
    exclusion_patterns: Iterable[str] = (),
    progress_callback: Optional[ProgressCallback] = None,
    skip_dirs: Iterable[Path] = (),
) -> ArchiveResult:
    """遍历目录并写入归档

    Args:
        source_dir: 源目录
        destination_file: 输出归档路径
        exclusion_patterns: 排除规则（正则表达式）
        progress_callback: 进度回调
        skip_dirs: 整个跳过的目录

    Returns:
        ArchiveResult: 归档结果

    Raises:
        SourceNotFound: 源目录不存在
        PatternError: 排除规则无效
        FileSystemError: 读写失败
    """
    start = time.perf_counter()
    collector = FileCollector(ExclusionFilter(exclusion_patterns), skip_dirs)
    files = collector.collect_directory(Path(source_dir))
    stats = collector.get_statistics()
    debug(
        f"归档 {source_dir}: {stats['total_files']} 个文件, 排除 {stats['excluded_files']} 个, "
        f"共 {format_size(stats['total_size'])}",
        stage=LogStage.ARCHIVE,
    )
    return _write_archive(files, destination_file, start, progress_callback)


def build_archive_from_paths(
    paths: Iterable[Path],
    destination_file: Path,
    base_dir: Path,
    exclusion_patterns: Iterable[str] = (),
    progress_callback: Optional[ProgressCallback] = None,
) -> ArchiveResult:
    """把显式路径列表写入归档，目录递归展开

    Args:
        paths: 文件或目录路径
        destination_file: 输出归档路径
        base_dir: 归档内相对路径的基准目录
        exclusion_patterns: 排除规则（正则表达式）
        progress_callback: 进度回调

    Returns:
        ArchiveResult: 归档结果
    """
    start = time.perf_counter()
    collector = FileCollector(ExclusionFilter(exclusion_patterns))
    files = collector.collect_paths(paths, Path(base_dir))
    return _write_archive(files, destination_file, start, progress_callback)


def create_love_archive(
    project: Project,
    build_settings: BuildSettings,
    progress_callback: Optional[ProgressCallback] = None,
) -> Tuple[Path, BuildStatistics]:
    """构建项目的 .love 文件

    发布目录本身总是被排除：按规范化后的正则过滤，同时按解析后的路径跳过。

    Returns:
        Tuple[Path, BuildStatistics]: .love 路径和统计信息
    """
    release_path = project.get_release_path(build_settings)
    love_path = release_path / project.love_file_name
    # "./release/" 和 "release" 规范化成同一条规则
    output_dir = PurePath(os.path.normpath(build_settings.output_directory.replace('\\', '/'))).as_posix()
    patterns = set(build_settings.ignore_list)
    patterns.add(f"^{re.escape(output_dir)}/")

    info(f"输出 .love 文件: {love_path}", stage=LogStage.ARCHIVE)
    try:
        result = build_archive(Path(project.directory), love_path, patterns, progress_callback,
                               skip_dirs=[release_path])
    except BuildError as e:
        error(f"构建 .love 失败: {e}", stage=LogStage.ARCHIVE)
        raise

    success(f".love 构建完成 - {result.entry_count} 个文件, {format_size(result.size)}", stage=LogStage.ARCHIVE)
    return love_path, BuildStatistics(
        name="LÖVE",
        file_name=love_path.name,
        time=result.time,
        size=result.size,
    )
