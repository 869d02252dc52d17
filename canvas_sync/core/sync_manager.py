"""
The sync operation: list a course's files, skip the ones already recorded, and
hand the rest to the downloader under their folder paths.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import aiohttp
from rich.markup import escape

from canvas_sync.api.client import CanvasAPIClient
from canvas_sync.cli.progress_manager import ProgressManager
from canvas_sync.exceptions import CanvasAPIError, DownloadError, ListingFetchError
from canvas_sync.models.config import SyncConfig
from canvas_sync.models.records import CourseFile, FileRecord
from canvas_sync.models.stats import SyncStats
from canvas_sync.storage.record_store import RecordStore
from canvas_sync.transfer.downloader import Downloader
from canvas_sync.utils.path import build_local_path

from .path_resolver import FolderPathResolver

log = logging.getLogger(__name__)


@dataclass
class SyncContext:
    """
    Per-course state for one sync run.

    Created when the run starts; the records are written back once at the end
    and the folder path cache dies with the context.
    """

    course_id: str
    records: dict[int, FileRecord]
    folder_paths: dict[int, str] = field(default_factory=dict)

    @property
    def course_folder(self) -> str:
        return self.course_id


@dataclass
class SyncResult:
    """Outcome of a sync run; `count` is the number of files dispatched."""

    course_id: str
    stats: SyncStats
    dispatched: list[FileRecord] = field(default_factory=list)
    planned_paths: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.dispatched)


class SyncManager:
    """Runs the "check & download new files" operation for a course."""

    def __init__(
        self,
        config: SyncConfig,
        api_client: CanvasAPIClient,
        record_store: RecordStore,
        downloader: Downloader,
        progress_manager: ProgressManager | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.api_client = api_client
        self.record_store = record_store
        self.downloader = downloader
        self.progress_manager = progress_manager
        self.clock = clock

    def _notify(self, message: str, level: str = "info") -> None:
        if self.progress_manager:
            self.progress_manager.log_message(message, level)
        else:
            getattr(log, level, log.info)(message)

    async def fetch_listing(self, course_id: str) -> list[CourseFile]:
        try:
            return await self.api_client.fetch_course_files(course_id)
        except (CanvasAPIError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ListingFetchError(
                f"Failed to load the file list of course {course_id}: {e}"
            ) from e

    async def sync(self, course_id: str) -> SyncResult:
        """
        Downloads every listed file of `course_id` that is not in its history.

        Raises:
            ListingFetchError: The file listing could not be retrieved. Nothing
            is dispatched or recorded in that case.
        """
        context = SyncContext(course_id, self.record_store.load(course_id))
        stats = SyncStats(dry_run=self.config.dry_run)
        result = SyncResult(course_id, stats)

        files = await self.fetch_listing(course_id)
        stats.files_listed = len(files)
        new_files = [f for f in files if f.id not in context.records]
        stats.files_skipped_history = len(files) - len(new_files)

        if not new_files:
            self._notify("[green]✓ No new files found.[/green]")
            return result

        log.debug(
            f"Course {course_id}: {len(new_files)} new of {len(files)} listed files."
        )
        if self.progress_manager:
            self.progress_manager.initialize_session(len(new_files))

        resolver = FolderPathResolver(self.api_client, context.folder_paths, stats)
        try:
            for course_file in new_files:
                await self._process_file(context, resolver, course_file, result)
        finally:
            if result.dispatched:
                self.record_store.save(course_id, context.records)

        stats.total_size_downloaded = self.downloader.bytes_written
        if self.config.dry_run:
            self._notify(f"Would queue {len(result.planned_paths)} new file(s).")
        else:
            self._notify(
                f"[bold cyan]📥 Queued {result.count} new file(s) for download."
                "[/bold cyan]"
            )
        return result

    async def _process_file(
        self,
        context: SyncContext,
        resolver: FolderPathResolver,
        course_file: CourseFile,
        result: SyncResult,
    ) -> None:
        folder_path = await resolver.resolve(course_file.folder_id)
        local_path = build_local_path(
            context.course_folder, folder_path, course_file.display_name
        )
        result.planned_paths.append(local_path)

        if self.config.dry_run:
            self._notify(
                f"  [cyan]→ (Dry Run)[/] Would save to [dim]{escape(local_path)}[/dim]"
            )
            return

        log.info(f"📥 Downloading: [dim]{escape(local_path)}[/dim]")
        queued_at = self.clock()
        failed = False
        try:
            await self.downloader.dispatch(course_file.url, local_path)
        except DownloadError as e:
            failed = True
            result.stats.files_failed += 1
            result.stats.failed_names.append(course_file.display_name)
            log.error(
                f"[red]✗ Failed to download {escape(course_file.display_name)}[/red]"
                f" ({e})"
            )

        # A failed transfer is still recorded unless configured otherwise.
        if failed and not self.config.record_failed_downloads:
            return

        record = FileRecord(
            id=course_file.id, name=course_file.display_name, time=queued_at
        )
        context.records[course_file.id] = record
        result.dispatched.append(record)
        result.stats.files_dispatched += 1
