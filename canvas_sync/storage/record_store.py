"""
The per-course record of files that have already been handed to the downloader.
"""

import json
import logging

from canvas_sync.models.records import FileRecord

from .kv_store import KeyValueStore

log = logging.getLogger(__name__)

STORAGE_KEY_PREFIX = "canvas_downloaded_file_ids_"


def storage_key(course_id: str) -> str:
    """The key a course's records are kept under."""
    return f"{STORAGE_KEY_PREFIX}{course_id}"


class RecordStore:
    """
    Loads and saves the `file id -> FileRecord` mapping of each course.

    The mapping is serialized as one JSON object per course. Values written by
    the first versions of the tool were a plain JSON array of IDs; those are
    read as records with no name and a zero timestamp.
    """

    def __init__(self, kv_store: KeyValueStore):
        self.kv_store = kv_store

    def load(self, course_id: str) -> dict[int, FileRecord]:
        raw = self.kv_store.get(storage_key(course_id))
        if not raw:
            return {}
        try:
            return self._parse(course_id, json.loads(raw))
        except (ValueError, TypeError, AttributeError) as e:
            log.error(
                f"[red]Download history for course {course_id} is corrupt and "
                f"will be ignored: {e}[/red]"
            )
            return {}

    def _parse(self, course_id: str, data) -> dict[int, FileRecord]:
        if isinstance(data, list):
            log.debug(f"Reading legacy ID list for course {course_id}.")
            return {int(file_id): FileRecord(id=int(file_id)) for file_id in data}
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")

        return {
            int(file_id): FileRecord(
                id=int(file_id), name=entry.get("name", ""), time=entry.get("time", 0)
            )
            for file_id, entry in data.items()
        }

    def save(self, course_id: str, records: dict[int, FileRecord]) -> None:
        payload = {str(file_id): record.to_storage() for file_id, record in records.items()}
        self.kv_store.set(storage_key(course_id), json.dumps(payload, ensure_ascii=False))
        log.debug(f"Saved {len(records)} records for course {course_id}.")

    def delete(self, course_id: str, file_ids: set[int]) -> list[int]:
        """Removes the given IDs from a course's records and returns those removed."""
        records = self.load(course_id)
        removed = [file_id for file_id in records if file_id in file_ids]
        if removed:
            for file_id in removed:
                del records[file_id]
            self.save(course_id, records)
        return removed

    def reset(self, course_id: str) -> bool:
        """Clears the history of one course, leaving other courses untouched."""
        return self.kv_store.remove(storage_key(course_id))

    def courses(self) -> list[str]:
        """Course IDs that have a stored history."""
        return [
            key[len(STORAGE_KEY_PREFIX) :]
            for key in self.kv_store.keys(STORAGE_KEY_PREFIX)
        ]
