"""
Windows 构建

把 love.exe 和 .love 文件按字节拼接成游戏 exe，连同运行时附带的
.dll/.txt/.ico 文件一起放进临时目录，最后打包成发布用的 .zip。
"""

import shutil
import time
from pathlib import Path
from typing import Iterator, TYPE_CHECKING

from ..utils import format_size
from ..utils.logging import info, success, debug, error, LogStage
from ..utils.paths import discard_path, remove_path
from .archiver import CHUNK_SIZE, build_archive_from_paths
from .build_context import BuildError, FileSystemError, RuntimeNotFound
from .models import Bitness, BuildSettings, BuildStatistics, LoveVersion, Platform, Project

if TYPE_CHECKING:
    from ..runtime.cache import RuntimeCache

LOVE_EXECUTABLE = "love.exe"
# 需要随 exe 一起分发的运行时文件
COMPANION_PATTERNS = ("*.dll", "*.txt", "*.ico")


def get_output_filename(project: Project) -> str:
    """游戏 exe 文件名"""
    return f"{project.package_name}.exe"


def get_zip_output_name(project: Project, bitness: Bitness) -> str:
    """发布目录名（不含 .zip 扩展名）"""
    suffix = "win64" if bitness is Bitness.X64 else "win32"
    return f"{project.title}-{suffix}"


def fuse_executable(runtime_exe: Path, love_file: Path, output_file: Path) -> int:
    """按顺序拼接 love.exe 和 .love，中间没有任何分隔

    LÖVE 启动时从自身文件末尾定位附加的归档，所以顺序和字节必须完全一致。

    Returns:
        int: 写入的字节数
    """
    written = 0
    with open(output_file, 'wb') as out:
        for part in (runtime_exe, love_file):
            with open(part, 'rb') as src:
                shutil.copyfileobj(src, out, CHUNK_SIZE)
            written = out.tell()
    return written


def iter_companion_files(runtime_dir: Path) -> Iterator[Path]:
    """运行时目录中需要附带的文件（按模式分组，组内排序）"""
    for pattern in COMPANION_PATTERNS:
        for path in sorted(runtime_dir.glob(pattern)):
            if path.is_file():
                yield path


def create_windows_artifact(
    project: Project,
    build_settings: BuildSettings,
    version: LoveVersion,
    bitness: Bitness,
    love_file: Path,
    runtime_cache: "RuntimeCache",
) -> BuildStatistics:
    """构建 Windows 发布包

    Args:
        project: 项目信息
        build_settings: 构建设置
        version: LÖVE 版本
        bitness: 目标架构
        love_file: 已构建好的 .love 文件
        runtime_cache: 运行时缓存

    Returns:
        BuildStatistics: 最终 .zip 的统计信息

    Raises:
        UnsupportedTargetError: 版本/架构组合不受支持
        RuntimeNotFound: 缓存中没有对应运行时
        FileSystemError: 文件操作失败
    """
    start = time.perf_counter()
    stage_name = f"Windows {bitness.value}"

    # 1. 定位运行时（之前不做任何文件系统修改）
    location = runtime_cache.locate(version, Platform.WINDOWS, bitness)
    love_exe_path = location.path / LOVE_EXECUTABLE
    if not love_exe_path.is_file():
        raise RuntimeNotFound(
            f"{LOVE_EXECUTABLE} 不存在: '{love_exe_path}'\n"
            f"提示: 可能需要先下载 LÖVE: `boon love download {version.value}`"
        )
    if not Path(love_file).is_file():
        raise BuildError(f".love 文件不存在: {love_file}")

    release_path = project.get_release_path(build_settings)
    zip_name = get_zip_output_name(project, bitness)
    staging_path = release_path / zip_name
    zip_path = release_path / f"{zip_name}.zip"

    # 2. 重新创建临时目录
    try:
        if staging_path.exists():
            info(f"删除已存在的目录 {staging_path}", stage=LogStage.WINDOWS)
            remove_path(staging_path)
        staging_path.mkdir()
    except OSError as e:
        raise FileSystemError(f"无法创建构建目录 '{staging_path}': {e}") from e

    try:
        # 3. 拼接 exe
        exe_path = staging_path / get_output_filename(project)
        info(f"从 {love_exe_path} 复制 LÖVE", stage=LogStage.WINDOWS)
        info(f"输出 exe 到 {exe_path}", stage=LogStage.WINDOWS)
        exe_size = fuse_executable(love_exe_path, Path(love_file), exe_path)
        debug(f"exe 大小 {format_size(exe_size)}", stage=LogStage.WINDOWS)

        # 4. 附带文件
        for companion in iter_companion_files(location.path):
            shutil.copyfile(companion, staging_path / companion.name)
            debug(f"复制 {companion.name}", stage=LogStage.WINDOWS)

        # 5. 打包临时目录的内容，条目位于 zip 根部
        info(f"打包 {zip_path}", stage=LogStage.WINDOWS)
        result = build_archive_from_paths([staging_path], zip_path, base_dir=staging_path)

        # 6. 删除临时目录
        info(f"删除 {staging_path}", stage=LogStage.WINDOWS)
        remove_path(staging_path)
    except BuildError as e:
        error(f"{stage_name} 构建失败: {e}", stage=LogStage.WINDOWS)
        discard_path(staging_path)
        raise
    except OSError as e:
        error(f"{stage_name} 构建失败: {e}", stage=LogStage.WINDOWS)
        discard_path(staging_path)
        raise FileSystemError(f"{stage_name} 构建失败: {e}") from e

    success(f"{stage_name} 构建完成 - {zip_path.name} ({format_size(result.size)})", stage=LogStage.WINDOWS)
    return BuildStatistics(
        name=stage_name,
        file_name=zip_path.name,
        time=time.perf_counter() - start,
        size=zip_path.stat().st_size,
    )
