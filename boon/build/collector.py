"""
文件收集器

遍历项目目录，按排除规则（正则表达式）过滤需要打包的文件。
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Tuple

from ..utils.logging import warning, debug, LogStage
from .build_context import PatternError, SourceNotFound


@dataclass(frozen=True)
class FileInfo:
    """文件信息"""
    path: Path  # 绝对路径
    relative_path: str  # 归档内的相对路径，统一使用正斜杠
    size: int  # 文件大小（字节）
    mtime: float  # 修改时间（时间戳）


def compile_pattern(pattern: str) -> Pattern[str]:
    """编译单个排除规则

    Raises:
        PatternError: 规则不是合法的正则表达式
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(pattern, str(e)) from e


def should_exclude(path: str, patterns: Iterable[str]) -> bool:
    """检查路径是否被排除（每次调用重新编译规则）

    任意一条规则在路径中匹配（search 语义，不隐式锚定）即排除。

    Args:
        path: 正斜杠分隔的相对路径
        patterns: 排除规则

    Returns:
        bool: 是否被排除
    """
    return any(compile_pattern(pattern).search(path) for pattern in patterns)


class ExclusionFilter:
    """排除过滤器

    构造时编译全部规则并冻结，一次构建内复用，语义与 should_exclude 相同。
    """

    def __init__(self, patterns: Iterable[str] = ()):
        # 排序仅为了让日志和错误信息稳定
        self.patterns: Tuple[str, ...] = tuple(sorted(set(patterns)))
        self._compiled: Tuple[Pattern[str], ...] = tuple(compile_pattern(p) for p in self.patterns)

    def is_excluded(self, relative_path: str) -> bool:
        """检查路径是否被排除

        Args:
            relative_path: 相对路径（反斜杠会被规范化为正斜杠）

        Returns:
            bool: 是否被排除
        """
        path_str = relative_path.replace('\\', '/')
        return any(regex.search(path_str) for regex in self._compiled)

    def __len__(self) -> int:
        return len(self.patterns)


def _warn_unreadable(err: OSError) -> None:
    # 无法列出的目录跳过，不中止整个遍历
    warning(f"跳过无法读取的路径 {err.filename}: {err.strerror}", stage=LogStage.COLLECT)


def walk_directory(directory: Path, skip_dirs: Iterable[Path] = ()) -> Iterator[Path]:
    """递归遍历目录，按名称排序输出其中的所有文件

    符号链接目录不会被跟随；无法读取的目录记录警告后跳过。

    Args:
        directory: 要遍历的目录
        skip_dirs: 不进入的目录，按解析后的绝对路径比较

    Yields:
        Path: 文件路径
    """
    skip = {Path(p).resolve() for p in skip_dirs}
    for root, dirs, files in os.walk(directory, onerror=_warn_unreadable):
        if skip:
            dirs[:] = [d for d in dirs if (Path(root) / d).resolve() not in skip]
        dirs.sort()
        for name in sorted(files):
            yield Path(root) / name


class FileCollector:
    """文件收集器

    负责扫描目录并应用排除规则，结果顺序稳定。
    """

    def __init__(self, exclusion_filter: Optional[ExclusionFilter] = None, skip_dirs: Iterable[Path] = ()):
        self.exclusion_filter = exclusion_filter or ExclusionFilter()
        # 整个跳过的目录（例如发布目录），不计入排除数
        self.skip_dirs: Tuple[Path, ...] = tuple(Path(p) for p in skip_dirs)
        self.collected_files: List[FileInfo] = []
        self.excluded_count: int = 0
        self.total_size: int = 0

    def collect_directory(self, source_dir: Path) -> List[FileInfo]:
        """收集目录下所有未被排除的文件

        Args:
            source_dir: 源目录，归档内路径相对于它计算

        Returns:
            List[FileInfo]: 文件信息列表

        Raises:
            SourceNotFound: 源目录不存在或不是目录
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise SourceNotFound(f"源目录不存在: {source_dir}")

        self._reset()
        for file_path in walk_directory(source_dir, self.skip_dirs):
            self._add(file_path, file_path.relative_to(source_dir).as_posix())
        return self.collected_files

    def collect_paths(self, paths: Iterable[Path], base_dir: Path) -> List[FileInfo]:
        """收集显式路径列表，目录会被递归展开

        Args:
            paths: 文件或目录路径
            base_dir: 归档内相对路径的基准目录

        Returns:
            List[FileInfo]: 文件信息列表

        Raises:
            SourceNotFound: 某个路径不存在
        """
        base_dir = Path(base_dir)
        self._reset()
        for path in paths:
            path = Path(path)
            if path.is_dir():
                for file_path in walk_directory(path, self.skip_dirs):
                    self._add(file_path, file_path.relative_to(base_dir).as_posix())
            elif path.is_file():
                self._add(path, path.relative_to(base_dir).as_posix())
            else:
                raise SourceNotFound(f"输入路径不存在: {path}")
        return self.collected_files

    def get_statistics(self) -> Dict[str, int]:
        """获取收集统计信息"""
        return {
            'total_files': len(self.collected_files),
            'excluded_files': self.excluded_count,
            'total_size': self.total_size,
        }

    def _reset(self) -> None:
        self.collected_files = []
        self.excluded_count = 0
        self.total_size = 0

    def _add(self, file_path: Path, relative_path: str) -> None:
        if self.exclusion_filter.is_excluded(relative_path):
            self.excluded_count += 1
            debug(f"排除: {relative_path}", stage=LogStage.COLLECT)
            return

        try:
            stat = file_path.stat()
        except OSError as e:
            # 遍历期间消失或无权限的零散文件
            warning(f"跳过无法访问的文件 {relative_path}: {e}", stage=LogStage.COLLECT)
            return

        self.collected_files.append(FileInfo(
            path=file_path,
            relative_path=relative_path,
            size=stat.st_size,
            mtime=stat.st_mtime,
        ))
        self.total_size += stat.st_size


def collect_files(source_dir: Path, exclude_patterns: Iterable[str] = ()) -> List[FileInfo]:
    """便捷函数：收集目录文件

    Args:
        source_dir: 源目录
        exclude_patterns: 排除规则（正则表达式）

    Returns:
        List[FileInfo]: 文件信息列表
    """
    collector = FileCollector(ExclusionFilter(exclude_patterns))
    return collector.collect_directory(source_dir)
