"""
Build 命令实现

构建 .love 以及 Windows/macOS 发布包的核心命令。
"""

import traceback
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ...build.models import BuildStatistics, DEFAULT_LOVE_VERSION, LoveVersion, Target
from ...config import load_config, ConfigError, ConfigValidationError
from ...utils import format_duration, format_size
from ...utils.logging import set_log_level, set_log_file, OutputLevel


console = Console()


def render_statistics(statistics: List[BuildStatistics]) -> Table:
    """把构建统计渲染成表格"""
    table = Table(title="构建报告")
    table.add_column("构建", style="cyan")
    table.add_column("文件", style="green")
    table.add_column("耗时", justify="right")
    table.add_column("大小", justify="right")

    for stats in statistics:
        table.add_row(stats.name, stats.file_name, format_duration(stats.time), format_size(stats.size))
    return table


def build_command(
    directory: str = typer.Argument(..., help="项目目录（包含 main.lua）"),
    target: List[Target] = typer.Option(
        [Target.LOVE], "--target", "-t", help="目标平台，可重复指定", case_sensitive=False,
    ),
    love_version: LoveVersion = typer.Option(
        DEFAULT_LOVE_VERSION, "--love-version", "-V", help="目标 LÖVE 版本",
    ),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="日志输出文件"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出详细调试日志 (DEBUG 级别)"),
) -> None:
    """构建游戏

    示例:
        boon build .
        boon build . -t windows -t macos
        boon build ./game -t all -V 11.2
    """
    from ...build.builder import Builder

    # 全局 -v 已经设置过级别时不覆盖
    if verbose:
        set_log_level(OutputLevel.DEBUG)
    if log_file:
        set_log_file(log_file)

    project_dir = Path(directory)
    if not project_dir.is_dir():
        console.print(f"[red]项目目录不存在: {project_dir}[/red]")
        raise typer.Exit(1)

    try:
        config_obj = load_config(project_dir)
    except ConfigValidationError as e:
        console.print("[red]配置验证失败:[/red]")
        console.print(e.format_errors())
        raise typer.Exit(1)
    except ConfigError as e:
        console.print(f"[red]配置错误[/red]: {e}")
        raise typer.Exit(1)

    project = config_obj.to_project(project_dir)
    build_settings = config_obj.to_build_settings(target)

    targets = ", ".join(sorted(t.value for t in build_settings.targets))
    console.print(f"[cyan]构建目标 `{targets}`，目录 `{project_dir}`[/cyan]")

    try:
        result = Builder().build(project, build_settings, love_version)
    except Exception as e:
        console.print(f"[red]✗ 构建过程中发生意外错误[/red]: {e}")
        if log_file:
            console.print(f"[yellow]详细错误信息:[/yellow]\n{traceback.format_exc()}")
        raise typer.Exit(1)

    if not result.success:
        console.print(f"[red]✗ 构建失败[/red]: {result.error}")
        raise typer.Exit(1)

    console.print()
    console.print(render_statistics(result.statistics))
