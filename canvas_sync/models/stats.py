"""
Dataclass for tracking sync session statistics.
"""

from dataclasses import dataclass, field


@dataclass
class SyncStats:
    """Counters for a single sync run of one course."""

    files_listed: int = 0
    files_skipped_history: int = 0
    files_dispatched: int = 0
    files_failed: int = 0
    folders_fetched: int = 0
    folders_failed: int = 0
    total_size_downloaded: int = 0
    dry_run: bool = False
    failed_names: list[str] = field(default_factory=list)

    @property
    def files_new(self) -> int:
        return self.files_listed - self.files_skipped_history
