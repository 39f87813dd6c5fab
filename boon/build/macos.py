"""
macOS 构建

复制 love.app，注入 .love 文件并改写 Info.plist，得到 <标题>.app。
所有修改都在一个临时名字的副本上完成，最后才重命名为正式名字，
因此发布目录里的 <标题>.app 总是完整改写过的。
"""

import shutil
import time
from pathlib import Path
from typing import TYPE_CHECKING

from ..utils import format_size
from ..utils.logging import info, success, error, LogStage
from ..utils.paths import directory_size, discard_path, remove_path
from .build_context import BuildError, FileSystemError, RuntimeNotFound
from .models import Bitness, BuildSettings, BuildStatistics, LoveVersion, Platform, Project
from .plist import rewrite_info_plist

if TYPE_CHECKING:
    from ..runtime.cache import RuntimeCache

PARTIAL_SUFFIX = ".partial"


def get_output_filename(project: Project) -> str:
    """应用包目录名"""
    return f"{project.title}.app"


def resources_path(bundle: Path) -> Path:
    return bundle / "Contents" / "Resources"


def info_plist_path(bundle: Path) -> Path:
    return bundle / "Contents" / "Info.plist"


def create_macos_artifact(
    project: Project,
    build_settings: BuildSettings,
    version: LoveVersion,
    bitness: Bitness,
    love_file: Path,
    runtime_cache: "RuntimeCache",
) -> BuildStatistics:
    """构建 macOS 应用包

    Args:
        project: 项目信息
        build_settings: 构建设置
        version: LÖVE 版本
        bitness: 目标架构（只支持 x64）
        love_file: 已构建好的 .love 文件
        runtime_cache: 运行时缓存

    Returns:
        BuildStatistics: 应用包的统计信息

    Raises:
        UnsupportedTargetError: 版本/架构组合不受支持
        RuntimeNotFound: 缓存中没有对应运行时
        MetadataRewriteError: Info.plist 结构不符合预期
        FileSystemError: 文件操作失败
    """
    start = time.perf_counter()
    stage_name = f"macOS {bitness.value}"

    location = runtime_cache.locate(version, Platform.MACOS, bitness)
    if not location.path.is_dir():
        raise RuntimeNotFound(
            f"LÖVE 不存在: '{location.path}'\n"
            f"提示: 可能需要先下载 LÖVE: `boon love download {version.value}`"
        )
    if not Path(love_file).is_file():
        raise BuildError(f".love 文件不存在: {love_file}")

    release_path = project.get_release_path(build_settings)
    final_path = release_path / get_output_filename(project)
    partial_path = release_path / f".{final_path.name}{PARTIAL_SUFFIX}"

    try:
        # 上次失败遗留的半成品
        if partial_path.exists():
            remove_path(partial_path)

        info(f"从 {location.path} 复制 LÖVE 到 {release_path}", stage=LogStage.MACOS)
        shutil.copytree(location.path, partial_path, symlinks=True)

        resources = resources_path(partial_path)
        info(f"复制 .love 文件到 {resources_path(final_path)}", stage=LogStage.MACOS)
        resources.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(love_file, resources / Path(love_file).name)

        rewrite_info_plist(info_plist_path(partial_path), project)

        if final_path.exists():
            info(f"删除已存在的输出 '{final_path}'", stage=LogStage.MACOS)
            remove_path(final_path)

        info(f"重命名为 {final_path}", stage=LogStage.MACOS)
        partial_path.rename(final_path)
    except BuildError as e:
        error(f"{stage_name} 构建失败: {e}", stage=LogStage.MACOS)
        discard_path(partial_path)
        raise
    except OSError as e:
        error(f"{stage_name} 构建失败: {e}", stage=LogStage.MACOS)
        discard_path(partial_path)
        raise FileSystemError(f"{stage_name} 构建失败: {e}") from e

    size = directory_size(final_path)
    success(f"{stage_name} 构建完成 - {final_path.name} ({format_size(size)})", stage=LogStage.MACOS)
    return BuildStatistics(
        name=stage_name,
        file_name=final_path.name,
        time=time.perf_counter() - start,
        size=size,
    )
