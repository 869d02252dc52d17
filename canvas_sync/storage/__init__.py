"""
Storage Layer.

This package handles all data persistence: the configuration file and the
per-course download history kept in an SQLite key/value table.
"""

from .config_manager import ConfigManager
from .kv_store import KeyValueStore
from .record_store import RecordStore

__all__ = ["ConfigManager", "KeyValueStore", "RecordStore"]
