"""CLI interface for DayZ Mod Sync."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from dayz_mod_sync import __version__
from dayz_mod_sync.config import Config, load_config
from dayz_mod_sync.core import ModAction, ModSynchronizer, Orchestrator, ServerLauncher, SyncReport
from dayz_mod_sync.utils.logger import setup_logging

app = typer.Typer(
    name="dayz-mod-sync",
    help="Sync DayZ workshop mods to a dedicated server and launch it",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config.yaml")]
SourceOption = Annotated[Optional[Path], typer.Option("--source", help="Client workshop folder")]
DestOption = Annotated[Optional[Path], typer.Option("--dest", help="Server folder")]
ExecutableOption = Annotated[Optional[Path], typer.Option("--executable", help="Server executable")]
KeysOption = Annotated[Optional[Path], typer.Option("--keys", help="Server key directory")]
LogLevelOption = Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")]


def version_callback(value: bool):
    if value:
        console.print(f"dayz-mod-sync version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = False,
):
    """DayZ Mod Sync - keep server mods in step with the workshop."""
    pass


# --- Shared helpers ---


def _load(
    config_path: Optional[Path],
    source: Optional[Path] = None,
    dest: Optional[Path] = None,
    executable: Optional[Path] = None,
    keys: Optional[Path] = None,
    log_level: Optional[str] = None,
) -> Config:
    """Load configuration with command line overrides and set up logging."""
    overrides = {
        "paths": {
            "source_root": str(source) if source else None,
            "dest_root": str(dest) if dest else None,
            "executable": str(executable) if executable else None,
            "key_dest_root": str(keys) if keys else None,
        },
        "app": {"log_level": log_level.upper() if log_level else None},
    }

    try:
        config = load_config(str(config_path) if config_path else None, overrides)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/] {e}")
        raise typer.Exit(1)

    setup_logging(
        log_level=config.app.log_level,
        log_to_file=config.app.log_to_file,
        log_file_path=config.app.log_file_path,
        log_rotation_size=config.app.log_rotation_size,
        log_retention_count=config.app.log_retention_count,
        json_format=config.app.json_logs,
    )
    return config


def _print_report(report: SyncReport) -> None:
    if report.error_message:
        console.print(f"[red]{report.error_message}[/]")
        return

    if not report.results:
        console.print("[yellow]No files to copy.[/]")
        return

    table = Table(title="Mod Sync")
    table.add_column("Mod", style="cyan")
    table.add_column("Action")
    table.add_column("Files", justify="right")
    table.add_column("Keys", justify="right")

    styles = {
        ModAction.COPIED: "green",
        ModAction.UPDATED: "green",
        ModAction.SKIPPED_UP_TO_DATE: "dim",
        ModAction.EXCLUDED: "dim",
        ModAction.FAILED: "red",
    }
    for result in report.results:
        style = styles[result.action]
        action = result.action.value.replace("_", " ")
        if result.error_message:
            action = f"{action}: {result.error_message}"
        table.add_row(result.mod.name, f"[{style}]{action}[/]", str(result.files_copied), str(result.keys_copied))

    console.print(table)
    console.print(
        f"[bold]Copied {report.copied_files}/{report.total_files} files "
        f"({report.progress:.1f}%), {report.keys_copied} keys[/]"
    )


# --- Commands ---


@app.command()
def run(
    config_path: ConfigOption = None,
    source: SourceOption = None,
    dest: DestOption = None,
    executable: ExecutableOption = None,
    keys: KeysOption = None,
    log_level: LogLevelOption = None,
    no_launch: Annotated[bool, typer.Option("--no-launch", help="Never start the server")] = False,
    pause: Annotated[bool, typer.Option("--pause", help="Wait for a key press before exiting")] = False,
):
    """Sync mods, then start the server if every mod was already up to date.

    Example: dayz-mod-sync run --config config.yaml --pause
    """
    config = _load(config_path, source, dest, executable, keys, log_level)
    result = Orchestrator(config).run(launch=False if no_launch else None)

    if result.sync_report is not None:
        _print_report(result.sync_report)
    if result.error_message:
        console.print(f"[red]An error occurred: {result.error_message}[/]")
    if result.launch_result is not None and not result.launch_result.success:
        console.print(f"[red]Server launch failed: {result.launch_result.error_message or result.launch_result.exit_code}[/]")

    if pause:
        typer.pause()

    if not result.success:
        raise typer.Exit(1)


@app.command()
def sync(
    config_path: ConfigOption = None,
    source: SourceOption = None,
    dest: DestOption = None,
    keys: KeysOption = None,
    log_level: LogLevelOption = None,
):
    """Copy new and updated mods and their keys without starting the server."""
    config = _load(config_path, source, dest, keys=keys, log_level=log_level)
    report = ModSynchronizer(config).sync()

    _print_report(report)
    if report.updated:
        console.print("[green]Mods updated.[/] Restart the server to load them.")
    elif report.error_message is None:
        console.print("All mods are up to date.")

    if not report.success:
        raise typer.Exit(1)


@app.command()
def launch(
    config_path: ConfigOption = None,
    dest: DestOption = None,
    executable: ExecutableOption = None,
    log_level: LogLevelOption = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the command instead of running it")] = False,
):
    """Start the server with every installed mod."""
    config = _load(config_path, dest=dest, executable=executable, log_level=log_level)
    launcher = ServerLauncher(config)

    if dry_run:
        try:
            command = launcher.build_command()
        except ValueError as e:
            console.print(f"[red]{e}[/]")
            raise typer.Exit(1)
        console.print(" ".join(command), markup=False)
        return

    result = launcher.launch()
    if not result.success:
        console.print(f"[red]Server launch failed: {result.error_message or result.exit_code}[/]")
        raise typer.Exit(1)


@app.command("mods")
def list_mods(
    config_path: ConfigOption = None,
    dest: DestOption = None,
    log_level: LogLevelOption = None,
):
    """List mods installed on the server and the generated mod parameter."""
    config = _load(config_path, dest=dest, log_level=log_level)
    launcher = ServerLauncher(config)
    mods = launcher.list_installed_mods()

    if not mods:
        console.print(f"[yellow]No mods installed in {config.paths.dest_root}[/]")
        return

    console.print(f"[bold]Installed mods ({config.paths.dest_root}):[/]")
    for mod in mods:
        console.print(f"  {mod}", markup=False)
    console.print(launcher.build_mod_parameter(mods), markup=False)


if __name__ == "__main__":
    app()
