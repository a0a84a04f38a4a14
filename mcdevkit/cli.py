"""
Command Line Interface for mcdevkit.

This module provides the main CLI interface using Click framework
for downloading and running Minecraft development servers.
"""

import asyncio
import logging
import sys
import tempfile
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn, DownloadColumn, Progress, TextColumn, TimeRemainingColumn, TransferSpeedColumn
)
from rich.table import Table

from . import __version__
from .config.logging_config import setup_logging
from .config.settings import config
from .exceptions import ConfigurationError, McDevKitError, UnsupportedVersionError
from .models import ServerConfig, Software, WorkingDirectory
from .servers.base import BaseServer
from .servers.paper import PaperServer
from .utils.api import check_valid_version, create_software_api, sort_versions
from .utils.system import JavaManager, PathManager, SystemInfo
from .utils.validation import ServerValidator

console = Console()
error_console = Console(stderr=True)
logger = logging.getLogger(__name__)

# Server type mapping
SERVER_TYPES = {
    Software.PAPER: PaperServer,
}


def _print_launch_info(server_config: ServerConfig) -> None:
    """Show the resolved launch configuration (debug mode)."""
    info_table = Table(title="Server Configuration")
    info_table.add_column("Property", style="yellow")
    info_table.add_column("Value", style="green")

    info_table.add_row("Software", server_config.software.value)
    info_table.add_row("Version", server_config.version)
    info_table.add_row("Memory", f"{server_config.memory} MB")
    info_table.add_row("Port", str(server_config.port))
    info_table.add_row(
        "Working Directory",
        "generated" if server_config.working_directory.is_generated
        else str(server_config.working_directory.path),
    )
    info_table.add_row("Args", "\n".join(server_config.server_args()) or "-")
    info_table.add_row("Plugins", "\n".join(p.name for p in server_config.plugins) or "-")

    console.print(info_table)


async def _prepare_server_async(server: BaseServer, show_progress: bool) -> Path:
    """Validate the version and prepare the workspace, with a download progress bar."""
    if not await check_valid_version(server.version):
        raise UnsupportedVersionError(f"Version {server.version} is not available")

    if not show_progress:
        return await server.prepare_workspace()

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=error_console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Downloading server.jar", total=None)

        def progress_callback(downloaded: int, total: int) -> None:
            progress.update(task_id, completed=downloaded, total=total or None)

        return await server.prepare_workspace(progress_callback)


async def _run_server_async(server: BaseServer, show_progress: bool) -> Optional[int]:
    await _prepare_server_async(server, show_progress)
    logger.info("Starting server.")
    return await server.start()


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.version_option(version=__version__, prog_name="mcdevkit")
@click.pass_context
def main(ctx: click.Context, debug: bool, no_color: bool) -> None:
    """mcdevkit - download and run Minecraft development servers."""

    log_level = "DEBUG" if debug else config.get("logging.level", "INFO")
    enable_rich = not no_color and config.get("ui.colored_output", True)
    setup_logging(log_level=log_level, enable_rich_logging=enable_rich)

    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["no_color"] = no_color

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


@main.command()
@click.argument('software', type=click.Choice(Software.names()))
@click.argument('version')
@click.argument('plugins', nargs=-1, type=click.Path(path_type=Path))
@click.option('--working-directory', '-w', type=click.Path(path_type=Path),
              help='Directory to run the server in (default: a new temporary directory)')
@click.option('--args', '-a', 'extra_args', multiple=True,
              help='Extra argument passed to the server, repeatable')
@click.option('--mem', '-m', type=int, default=lambda: config.get("servers.default_memory"),
              show_default="2048", help='Maximum heap size in MB')
@click.option('--gui', '-g', is_flag=True, help='Start the server with its GUI')
@click.option('--port', '-p', type=int, default=lambda: config.get("servers.default_port"),
              show_default="25565", help='Server port')
@click.option('--debug', '-d', is_flag=True, help='Print the launch configuration and debug logs')
@click.pass_context
def start(
    ctx: click.Context,
    software: str,
    version: str,
    plugins: Tuple[Path, ...],
    working_directory: Optional[Path],
    extra_args: Tuple[str, ...],
    mem: int,
    gui: bool,
    port: int,
    debug: bool
) -> None:
    """Download a server, install plugins and run it until it stops or Ctrl+C."""

    if debug and not ctx.obj.get("debug"):
        setup_logging(log_level="DEBUG", enable_rich_logging=not ctx.obj.get("no_color"))

    try:
        ServerValidator.validate_memory(mem)
        ServerValidator.validate_port(port)
    except McDevKitError as e:
        error_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    server_config = ServerConfig(
        software=Software(software),
        version=version,
        plugins=list(plugins),
        working_directory=(
            WorkingDirectory.explicit(working_directory) if working_directory is not None
            else WorkingDirectory.generate()
        ),
        args=list(extra_args),
        memory=mem,
        gui=gui,
        port=port,
        debug=debug,
    )

    if debug:
        _print_launch_info(server_config)

    server = SERVER_TYPES[server_config.software](server_config)
    show_progress = config.get("ui.progress_bar", True)

    try:
        return_code = asyncio.run(_run_server_async(server, show_progress))
    except McDevKitError as e:
        logger.debug(f"Start failed: {e}", exc_info=True)
        error_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    logger.info(f"Server process exited with code {return_code}")
    console.print()
    console.print(Panel(
        f"[green]Server stopped.[/green]\n\nWorking directory: {server.working_directory}",
        title="mcdevkit",
        border_style="green"
    ))


@main.command()
@click.argument('software', type=click.Choice(Software.names()), default=Software.PAPER.value)
def versions(software: str) -> None:
    """List the versions a server software can be downloaded for."""

    console.print(f"[bold blue]Fetching available {software.title()} versions...[/bold blue]")

    try:
        with create_software_api(Software(software)) as api:
            response = api.fetch_versions()
    except McDevKitError as e:
        error_console.print(f"[red]Failed to fetch versions: {e}[/red]")
        sys.exit(1)

    available_versions = sort_versions(response.versions)
    if not available_versions:
        console.print(f"[yellow]No versions found for {software}[/yellow]")
        return

    table = Table(title=f"Available {software.title()} Versions")
    table.add_column("Version", style="cyan")
    table.add_column("Download URL", style="green")

    # Show recent versions (newest 20)
    for version in available_versions[:20]:
        label = f"{version} (latest)" if version == response.latest else version
        table.add_row(label, response.versions[version])

    console.print(table)

    if len(available_versions) > 20:
        console.print(f"[dim]Showing recent 20 versions out of {len(available_versions)} total[/dim]")


@main.command()
def system() -> None:
    """Display system information and requirements."""

    sys_info = SystemInfo.get_os_info()
    java_exe = JavaManager.get_java_executable()

    sys_table = Table(title="System Information")
    sys_table.add_column("Property", style="cyan")
    sys_table.add_column("Value", style="green")

    sys_table.add_row("Operating System", f"{sys_info['system']} {sys_info['release']}")
    sys_table.add_row("Architecture", sys_info["machine"])
    sys_table.add_row("Python Version", sys_info["python"])
    sys_table.add_row("Java Executable", java_exe or "[red]not found[/red]")
    if java_exe:
        sys_table.add_row("Java Version", JavaManager.get_java_version(java_exe) or "unknown")

    console.print(sys_table)
    console.print()

    temp_root = PathManager.preferred_temp_root()
    config_table = Table(title="Configuration")
    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value", style="green")

    config_table.add_row("Config File", str(config.config_file))
    config_table.add_row("Log Directory", str(config.get_log_directory()))
    config_table.add_row(
        "Workspace Root",
        str(temp_root / config.get("workspace.parent_folder")) if temp_root
        else f"{tempfile.gettempdir()} (new folder per run)",
    )
    config_table.add_row("Default Memory", f"{config.get('servers.default_memory')} MB")
    config_table.add_row("Default Port", str(config.get("servers.default_port")))

    console.print(config_table)


@main.command(name="config")
@click.option('--reset', is_flag=True, help='Reset configuration to defaults')
def config_cmd(reset: bool) -> None:
    """Manage configuration settings."""

    if reset:
        if click.confirm("Are you sure you want to reset configuration to defaults?"):
            config.reset_to_defaults()
            console.print("[green]Configuration reset to defaults.[/green]")
        return

    console.print(f"[blue]Configuration file: {config.config_file}[/blue]")

    try:
        config.validate()
    except ConfigurationError as e:
        error_console.print(f"[red]{e}[/red]")
        error_console.print("Fix the file or run 'mcdevkit config --reset'.")
        sys.exit(1)

    console.print("Use --reset to reset to defaults or edit the file directly.")


if __name__ == "__main__":
    main()
