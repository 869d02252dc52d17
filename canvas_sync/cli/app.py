"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from canvas_sync import __version__
from canvas_sync.api.client import CanvasAPIClient
from canvas_sync.core.history import HistoryView
from canvas_sync.core.sync_manager import SyncManager
from canvas_sync.exceptions import CanvasSyncError
from canvas_sync.models.config import DEFAULT_BASE_URL
from canvas_sync.storage.config_manager import ConfigManager
from canvas_sync.storage.kv_store import KeyValueStore
from canvas_sync.storage.record_store import RecordStore
from canvas_sync.transfer.downloader import Downloader
from canvas_sync.utils.path import parse_course_id

from .formatters import (
    build_history_table,
    print_config,
    print_history_table,
    print_summary_panel,
    print_validation_table,
)
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("canvas_sync")

app = typer.Typer(
    name="canvas-sync",
    help=(
        "Download new files from a Canvas course, keeping its folder structure."
        " Use 'canvas-sync <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "canvas-sync"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"

COURSE_ARGUMENT_HELP = "Course ID or any Canvas URL containing /courses/<id>."


def _record_store() -> RecordStore:
    return RecordStore(KeyValueStore(CONFIG_DIR))


def _course_id(course: str) -> str:
    try:
        return parse_course_id(course)
    except CanvasSyncError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Canvas File Sync CLI"""
    if version:
        console.print(f"[bold]canvas-sync[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("canvas_sync").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]canvas-sync init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(CONFIG_FILE)
        print_config(CONFIG_FILE, config_manager.get_display_dict())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    token: str = typer.Argument(..., help="Canvas personal access token."),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--base-url", "-u", help="Root URL of the Canvas instance."
    ),
    output_dir: str = typer.Option(
        ".", "--output", "-o", help="Directory course folders are created in."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration without asking."
    ),
):
    """Initialize configuration with a Canvas access token."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    config_manager = ConfigManager(CONFIG_FILE)
    config_manager.save_new_config(
        {"token": token, "base_url": base_url, "output_dir": output_dir}
    )
    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print("Ready to sync! Try: [cyan]canvas-sync sync <COURSE>[/cyan]")


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_validation_table(config)
    except CanvasSyncError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command(name="sync")
def sync_command(
    course: str = typer.Argument(..., help=COURSE_ARGUMENT_HELP),
    output_dir: str | None = typer.Option(
        None, "-o", "--output", help="Override the output directory from the config."
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="List the files that would be downloaded without fetching or recording them.",
    ),
):
    """Check & download new files of a course."""
    course_id = _course_id(course)
    cli_options = {"dry_run": dry_run}
    if output_dir is not None:
        cli_options["output_dir"] = output_dir

    async def _sync_async():
        api_client = None
        downloader = None
        result = None
        duration = 0.0

        async with ProgressManager(console=console, dry_run=dry_run) as progress_manager:
            try:
                config = ConfigManager(CONFIG_FILE).load_config(cli_options)
                api_client = CanvasAPIClient(
                    config.base_url, config.token, config.per_page
                )
                downloader = Downloader(
                    Path(config.output_dir).expanduser(),
                    headers=api_client.auth_headers,
                    progress_manager=progress_manager,
                )
                manager = SyncManager(
                    config, api_client, _record_store(), downloader, progress_manager
                )

                if dry_run:
                    console.print(f"[bold cyan]🔍 Dry run for course {course_id}...[/bold cyan]")
                else:
                    console.print(f"[bold cyan]📥 Syncing course {course_id}...[/bold cyan]")

                start_time = time.monotonic()
                result = await manager.sync(course_id)
                duration = time.monotonic() - start_time

            except CanvasSyncError as e:
                console.print(f"[bold red]Error: {e}[/bold red]")
                raise typer.Exit(code=1) from e
            finally:
                if downloader:
                    await downloader.close()
                if api_client:
                    await api_client.close()

        if result and result.stats.files_new > 0:
            print_summary_panel(result.stats, duration)

    asyncio.run(_sync_async())


@app.command()
def history(
    course: str = typer.Argument(..., help=COURSE_ARGUMENT_HELP),
    filter_text: str = typer.Option(
        "", "--filter", "-F", help="Only show entries whose name contains this text."
    ),
):
    """View downloaded files of a course."""
    view = HistoryView(_record_store(), _course_id(course), filter_text)
    print_history_table(view)


@app.command()
def forget(
    course: str = typer.Argument(..., help=COURSE_ARGUMENT_HELP),
    file_ids: list[int] | None = typer.Argument(  # noqa: B008
        None, help="IDs of the history entries to delete."
    ),
    filter_text: str = typer.Option(
        "", "--filter", "-F", help="Restrict the selection to matching names."
    ),
    select_all: bool = typer.Option(
        False, "--all", "-a", help="Select every entry matching the filter."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Bypass the confirmation prompt."
    ),
):
    """Delete entries from a course's history so the next sync fetches them again."""
    view = HistoryView(_record_store(), _course_id(course), filter_text)
    if select_all:
        view.select_all(True)
    for file_id in file_ids or []:
        try:
            if not view.is_selected(file_id):
                view.toggle(file_id)
        except KeyError:
            console.print(f"[yellow]⚠️  No history entry with ID {file_id}.[/yellow]")

    selected = view.selected_visible()
    if not selected:
        console.print("[yellow]No entries selected.[/yellow]")
        raise typer.Exit()

    console.print(build_history_table(view))
    if not force and not typer.confirm(
        f"Delete {len(selected)} selected entr{'y' if len(selected) == 1 else 'ies'}?"
    ):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()

    removed = view.delete_selected()
    console.print(f"[green]✓ Deleted {len(removed)} entries.[/green]")
    print_history_table(view)


@app.command()
def reset(
    course: str = typer.Argument(..., help=COURSE_ARGUMENT_HELP),
    force: bool = typer.Option(
        False, "--force", "-f", help="Bypass the confirmation prompt."
    ),
):
    """Reset the download history of a course."""
    course_id = _course_id(course)
    if not force and not typer.confirm(
        f"Are you sure you want to clear the download history of course {course_id}? "
        "Every file will be downloaded again on the next sync."
    ):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()

    if _record_store().reset(course_id):
        console.print(f"[green]🗑️ Download history for course {course_id} cleared.[/green]")
    else:
        console.print(f"[dim]Course {course_id} has no download history.[/dim]")


@app.command()
def courses():
    """List the courses that have a download history."""
    record_store = _record_store()
    course_ids = record_store.courses()
    if not course_ids:
        console.print("[yellow]No download history yet.[/yellow]")
        return
    for course_id in course_ids:
        count = len(record_store.load(course_id))
        console.print(f"[cyan]{course_id}[/cyan]  [dim]{count} file(s)[/dim]")
