"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application, such as configuration, API payloads and
download records.
"""

from .config import SyncConfig
from .records import CourseFile, FileRecord, Folder
from .stats import SyncStats

__all__ = ["CourseFile", "FileRecord", "Folder", "SyncConfig", "SyncStats"]
