"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from canvas_sync.core.history import HistoryView
from canvas_sync.models.config import SyncConfig
from canvas_sync.models.stats import SyncStats
from canvas_sync.utils.formatting import format_duration, format_size, format_timestamp


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "AuthenticationError": [
            "• Your access token may have expired or been revoked.",
            "• Generate a new one in Canvas and run `canvas-sync init <TOKEN> --force`.",
        ],
        "ConfigurationError": [
            "• Run `canvas-sync init <TOKEN>` to create a configuration.",
            "• Use `canvas-sync --show-config` to inspect the current values.",
        ],
        "ListingFetchError": [
            "• Check that the course ID is correct and that you are enrolled.",
            "• The Canvas instance might be temporarily unavailable.",
        ],
        "InvalidCourseError": [
            "• Pass the numeric course ID or a URL such as "
            "https://oc.sjtu.edu.cn/courses/80071/files.",
        ],
        "ClientConnectorError": [
            "• A network connection issue occurred.",
            "• Verify `base_url` in the configuration file.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration, hiding sensitive data."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        if key == "token" and value:
            value = "[hidden]"
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            Text(content.strip()),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: SyncConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Canvas:", f"[green]{config.base_url}[/green]")
    table.add_row("Token:", "✓ Present" if config.token else "✗ Missing")
    table.add_row("Page Size:", str(config.per_page))
    table.add_row("Output Directory:", f"[dim]{config.output_dir}[/dim]")
    table.add_row(
        "Record Failed:",
        "✓ Enabled" if config.record_failed_downloads else "✗ Disabled",
    )

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def build_history_table(view: HistoryView) -> Table:
    """Renders the visible entries of a history view, oldest first."""
    toggle = "☑" if view.all_selected() else "☐"
    title = f"Downloaded Files (course {view.course_id})"
    if view.filter_text:
        title += f" matching '{view.filter_text}'"

    table = Table(title=title, box=box.ROUNDED)
    table.add_column(toggle, justify="center", width=3)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Downloaded", style="green")

    for record in view.visible():
        mark = "[bold]☑[/bold]" if view.is_selected(record.id) else "☐"
        table.add_row(
            mark, str(record.id), Text(record.name or "—"), format_timestamp(record.time)
        )
    return table


def print_history_table(view: HistoryView):
    """Displays a course's download history, or a notice when it is empty."""
    console = Console()
    if view.total == 0:
        console.print("[yellow]No files have been downloaded yet.[/yellow]")
        return
    visible = view.visible()
    if not visible:
        console.print(
            f"[yellow]No entries match '{view.filter_text}'.[/yellow] "
            f"[dim]({view.total} in total)[/dim]"
        )
        return
    console.print(build_history_table(view))
    console.print(f"[dim]{len(visible)} of {view.total} entries shown.[/dim]")


def print_summary_panel(stats: SyncStats, duration_s: float):
    """Displays the final summary of a sync run."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("Listed:", str(stats.files_listed))
    stats_table.add_row(
        "○ Already Recorded:", f"[yellow]{stats.files_skipped_history}[/yellow]"
    )
    stats_table.add_row(
        "✓ Queued:", f"[bold green]{stats.files_dispatched}[/bold green]"
    )
    if stats.files_failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.files_failed}[/bold red]")
        for name in stats.failed_names:
            stats_table.add_row("", f"[red]{escape(name)}[/red]")
    if stats.folders_failed > 0:
        stats_table.add_row(
            "⚠ Folder Lookups Failed:", f"[yellow]{stats.folders_failed}[/yellow]"
        )

    stats_table.add_row("", "")
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_size(stats.total_size_downloaded)}[/cyan]"
    )
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    if stats.dry_run:
        title = "🔍 [bold]Dry Run Summary[/bold]"
        border_color = "yellow"
    else:
        title = "📥 [bold]Sync Complete![/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
