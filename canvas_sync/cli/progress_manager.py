"""
Manages a Rich Live display for a sync run: an overall bar across the new files
of a course and a transfer bar for the file currently being written.
"""

import asyncio
import logging

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

log = logging.getLogger("canvas_sync")


class ProgressManager:
    """Owns the Live display; a dry run prints plain lines instead."""

    def __init__(self, console: Console, dry_run: bool = False):
        self.console = console
        self.dry_run = dry_run

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=20),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )

        self.overall_progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            "[progress.percentage]{task.percentage:>3.0f}%",
            TextColumn("{task.completed}/{task.total}"),
            console=console,
        )

        self._live: Live | None = None
        self._overall_task_id: TaskID | None = None
        self._stats = {"completed": 0, "failed": 0}

    def log_message(self, message: str, level: str = "info"):
        """Unified logging respecting dry_run mode."""
        if self.dry_run:
            style_map = {
                "info": "cyan",
                "warning": "yellow",
                "error": "red",
                "success": "green",
            }
            style = style_map.get(level, "")
            self.console.print(f"[{style}]{message}[/{style}]" if style else message)
        else:
            getattr(log, level, log.info)(message)

    def initialize_session(self, total_files: int):
        if not self.dry_run:
            self._overall_task_id = self.overall_progress.add_task(
                "New files", total=total_files, start=True
            )

    def add_file_task(self, description: str) -> TaskID | None:
        if self.dry_run:
            return None
        if len(description) > 55:
            description = description[:52] + "..."
        return self.progress.add_task(description, total=None, start=True)

    def update_task_progress(self, task_id: TaskID | None, completed: int):
        if task_id is not None and not self.dry_run:
            self.progress.update(task_id, completed=completed)

    def update_task_total(self, task_id: TaskID | None, total: int):
        if task_id is not None and not self.dry_run:
            self.progress.update(task_id, total=total)

    def remove_task(self, task_id: TaskID | None, success: bool = True):
        if task_id is None or self.dry_run:
            return
        try:
            self.progress.remove_task(task_id)
        except KeyError:
            return
        if success:
            self._stats["completed"] += 1
        else:
            self._stats["failed"] += 1
        if self._overall_task_id is not None:
            self.overall_progress.update(
                self._overall_task_id,
                completed=self._stats["completed"] + self._stats["failed"],
            )

    async def __aenter__(self):
        if self.dry_run:
            return self
        self._live = Live(
            Group(self.overall_progress, self.progress),
            console=self.console,
            refresh_per_second=12,
            vertical_overflow="visible",
        )
        self._live.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._live and not self.dry_run:
            await asyncio.sleep(0.2)
            self._live.stop()
