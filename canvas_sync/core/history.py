"""
A filterable, selectable view over one course's download history.
"""

import logging

from canvas_sync.models.records import FileRecord
from canvas_sync.storage.record_store import RecordStore

log = logging.getLogger(__name__)


class HistoryView:
    """
    Holds the filter text and selection of a history listing.

    The records are re-read from the store on `refresh()` and after every
    deletion, so a render always reflects what is persisted.
    """

    def __init__(self, record_store: RecordStore, course_id: str, filter_text: str = ""):
        self.record_store = record_store
        self.course_id = course_id
        self.filter_text = filter_text
        self.selected: set[int] = set()
        self._records: dict[int, FileRecord] = {}
        self.refresh()

    def refresh(self) -> None:
        self._records = self.record_store.load(self.course_id)
        self.selected &= set(self._records)

    @property
    def total(self) -> int:
        return len(self._records)

    def set_filter(self, text: str) -> None:
        self.filter_text = text

    def visible(self) -> list[FileRecord]:
        """Records matching the filter, oldest first."""
        needle = self.filter_text.strip().casefold()
        records = sorted(self._records.values(), key=lambda r: (r.time, r.id))
        if not needle:
            return records
        return [r for r in records if needle in r.name.casefold()]

    def is_selected(self, file_id: int) -> bool:
        return file_id in self.selected

    def toggle(self, file_id: int) -> bool:
        """Flips the selection of one entry and returns its new state."""
        if file_id not in self._records:
            raise KeyError(file_id)
        if file_id in self.selected:
            self.selected.discard(file_id)
            return False
        self.selected.add(file_id)
        return True

    def select_all(self, checked: bool = True) -> None:
        """Selects or clears every entry that passes the current filter."""
        visible_ids = {r.id for r in self.visible()}
        if checked:
            self.selected |= visible_ids
        else:
            self.selected -= visible_ids

    def all_selected(self) -> bool:
        """State of the select-all toggle for the current render."""
        visible = self.visible()
        return bool(visible) and all(r.id in self.selected for r in visible)

    def selected_visible(self) -> list[FileRecord]:
        return [r for r in self.visible() if r.id in self.selected]

    def delete_selected(self) -> list[int]:
        """
        Removes the selected entries from the store and re-reads it.

        Only entries visible under the current filter are deleted.
        """
        targets = {r.id for r in self.selected_visible()}
        if not targets:
            return []
        removed = self.record_store.delete(self.course_id, targets)
        log.info(
            f"Removed {len(removed)} entr{'y' if len(removed) == 1 else 'ies'} "
            f"from the history of course {self.course_id}."
        )
        self.selected -= set(removed)
        self.refresh()
        return removed
