"""
Core application engine.

`SyncManager` runs the download of new course files, delegating folder path
lookups to `FolderPathResolver`. `HistoryView` is the review/delete view over
the persisted records.
"""

from .history import HistoryView
from .path_resolver import FolderPathResolver
from .sync_manager import SyncContext, SyncManager, SyncResult

__all__ = [
    "FolderPathResolver",
    "HistoryView",
    "SyncContext",
    "SyncManager",
    "SyncResult",
]
