"""
love 子命令实现

管理本地缓存的多个 LÖVE 版本：download / remove / list。
"""

import typer
from rich.console import Console
from rich.table import Table

from ...build.build_context import BuildError
from ...build.models import LoveVersion
from ...runtime import RuntimeCache, RuntimeDownloader, DownloadError, releases_for_version


console = Console()

app = typer.Typer(
    name="love",
    help="管理多个 LÖVE 版本",
    no_args_is_help=True,
    add_completion=False,
)


@app.command("download")
def download_command(
    version: LoveVersion = typer.Argument(..., help="要下载的 LÖVE 版本"),
) -> None:
    """下载某个版本的 Windows 与 macOS 运行时"""
    downloader = RuntimeDownloader(RuntimeCache())
    try:
        downloader.download_version(version)
    except DownloadError as e:
        console.print(f"[red]下载失败[/red]: {e}")
        raise typer.Exit(1)

    console.print(f"\n[green]LÖVE {version.value} 现在可以用于构建了。[/green]")


@app.command("remove")
def remove_command(
    version: LoveVersion = typer.Argument(..., help="要删除的 LÖVE 版本"),
) -> None:
    """删除缓存中的某个版本"""
    cache = RuntimeCache()
    if not cache.is_installed(version):
        console.print(f"版本 '{version.value}' 未安装")
        return

    try:
        cache.remove(version)
    except BuildError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"已删除 LÖVE 版本 {version.value}。")


@app.command("list")
def list_command() -> None:
    """列出已安装的版本"""
    cache = RuntimeCache()
    installed = cache.installed_versions()

    table = Table(title=f"已安装的版本 ({cache.root})")
    table.add_column("版本", style="cyan")
    table.add_column("运行时", style="green")

    for version in installed:
        runtimes = []
        for release in releases_for_version(version):
            location = cache.locate(release.version, release.platform, release.bitness)
            mark = "✓" if location.exists() else "✗"
            runtimes.append(f"{mark} {release.platform.display_name} {release.bitness.value}")
        table.add_row(version.value, ", ".join(runtimes))

    if installed:
        console.print(table)
    else:
        console.print("没有已安装的版本。使用 `boon love download <版本>` 下载。")
