"""
Boon CLI 主入口

提供命令行接口，支持 init/build/clean/love/info 等命令。
"""

import sys
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..build.models import DEFAULT_LOVE_VERSION
from ..utils import configure_logging
from .commands import build, project, love


# 创建主应用
app = typer.Typer(
    name="boon",
    help="Boon - LÖVE 游戏构建与发布工具",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# 控制台输出
console = Console()


def version_callback(value: bool) -> None:
    """显示版本信息"""
    if value:
        console.print(f"Boon v{__version__}")
        raise typer.Exit()


def verbose_callback(verbose: bool) -> None:
    """配置详细输出"""
    configure_logging(level="DEBUG" if verbose else "INFO")


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="显示版本信息"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        callback=verbose_callback,
        help="启用详细输出"
    )
) -> None:
    """Boon - LÖVE 游戏构建与发布工具

    使用 --help 查看可用命令的详细信息。
    """
    pass


# 注册子命令
app.command("init", help="初始化项目配置")(project.init_command)
app.command("build", help="构建游戏")(build.build_command)
app.command("clean", help="清理发布目录")(project.clean_command)
app.add_typer(love.app, name="love")


@app.command("info")
def info_command() -> None:
    """显示系统信息"""
    from ..runtime import RuntimeCache, RUNTIME_RELEASES

    cache = RuntimeCache()

    table = Table(title="版本信息")
    table.add_column("组件", style="cyan")
    table.add_column("版本", style="green")

    table.add_row("Boon", __version__)
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("默认 LÖVE", DEFAULT_LOVE_VERSION.value)
    console.print(table)
    console.print()

    targets = Table(title="支持的运行时")
    targets.add_column("版本", style="cyan")
    targets.add_column("平台")
    targets.add_column("状态", style="green")

    for release in RUNTIME_RELEASES.values():
        location = cache.locate(release.version, release.platform, release.bitness)
        status = "✓ 已安装" if location.exists() else "✗ 未下载"
        targets.add_row(release.version.value, f"{release.platform.display_name} {release.bitness.value}", status)

    console.print(targets)
    console.print(f"\n缓存目录: {cache.root}")


if __name__ == "__main__":
    app()
