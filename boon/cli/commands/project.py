"""
init / clean 命令实现
"""

from pathlib import Path

import typer
from rich.console import Console

from ...config import load_config, init_config, ConfigError, CONFIG_FILE_NAME
from ...utils.paths import remove_path


console = Console()


def init_command(
    directory: str = typer.Argument(".", help="项目目录"),
) -> None:
    """在项目目录生成默认配置文件"""
    try:
        created = init_config(Path(directory))
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if created is None:
        console.print("项目已经初始化过了。")
    else:
        console.print(f"✓ 已生成 [green]{created}[/green]，请根据需要修改 {CONFIG_FILE_NAME}")


def clean_command(
    directory: str = typer.Argument(".", help="项目目录"),
) -> None:
    """删除发布目录中的全部构建产物"""
    project_dir = Path(directory).resolve()
    try:
        config_obj = load_config(project_dir)
    except ConfigError as e:
        console.print(f"[red]配置错误[/red]: {e}")
        raise typer.Exit(1)

    release_path = project_dir / config_obj.build.output_directory
    if release_path.exists():
        console.print(f"清理 {release_path}")
        try:
            remove_path(release_path)
        except OSError as e:
            console.print(f"[red]无法清理 {release_path}: {e}[/red]")
            raise typer.Exit(1)

    console.print("[green]发布目录已清理。[/green]")
