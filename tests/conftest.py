"""Shared fixtures and in-memory collaborators for the canvas-sync tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from canvas_sync.exceptions import CanvasAPIError, DownloadError
from canvas_sync.models.config import SyncConfig
from canvas_sync.models.records import CourseFile, Folder
from canvas_sync.storage.kv_store import KeyValueStore
from canvas_sync.storage.record_store import RecordStore


class FakeCanvasClient:
    """Serves a fixed listing and folder tree, logging every call."""

    def __init__(
        self,
        files: list[CourseFile] | None = None,
        folders: dict[int, Folder] | None = None,
        listing_status: int | None = None,
    ) -> None:
        self.files = files or []
        self.folders = folders or {}
        self.listing_status = listing_status
        self.calls: list[tuple] = []
        self.auth_headers = {"Authorization": "Bearer secret"}
        self.closed = False

    async def fetch_course_files(self, course_id: str) -> list[CourseFile]:
        self.calls.append(("files", course_id))
        if self.listing_status is not None:
            raise CanvasAPIError("listing failed", status=self.listing_status)
        return list(self.files)

    async def fetch_folder(self, folder_id: int) -> Folder:
        self.calls.append(("folder", folder_id))
        if folder_id not in self.folders:
            raise CanvasAPIError(f"folder {folder_id} not found", status=404)
        return self.folders[folder_id]

    def folder_calls(self) -> list[int]:
        return [call[1] for call in self.calls if call[0] == "folder"]

    async def close(self) -> None:
        self.closed = True


class FakeDownloader:
    """Accepts dispatches without touching the network."""

    def __init__(self, failing_urls: set[str] | None = None) -> None:
        self.failing_urls = failing_urls or set()
        self.dispatched: list[tuple[str, str]] = []
        self.bytes_written = 0

    async def dispatch(self, url: str, name: str) -> Path:
        self.dispatched.append((url, name))
        if url in self.failing_urls:
            raise DownloadError(f"Failed to download '{name}': 500")
        return Path(name)

    async def close(self) -> None:
        pass


def course_file(file_id: int, name: str, folder_id: int | None = None) -> CourseFile:
    return CourseFile(
        id=file_id,
        display_name=name,
        folder_id=folder_id,
        url=f"https://canvas.test/files/{file_id}/download",
    )


@pytest.fixture
def folder_tree() -> dict[int, Folder]:
    """course files -> Week 1 -> Slides, plus a sibling Week 2."""
    return {
        1: Folder(id=1, name="course files", parent_folder_id=None),
        2: Folder(id=2, name="Week 1", parent_folder_id=1),
        3: Folder(id=3, name="Slides", parent_folder_id=2),
        4: Folder(id=4, name="Week 2", parent_folder_id=1),
    }


@pytest.fixture
def kv_store(tmp_path: Path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "config")


@pytest.fixture
def record_store(kv_store: KeyValueStore) -> RecordStore:
    return RecordStore(kv_store)


@pytest.fixture
def config(tmp_path: Path) -> SyncConfig:
    return SyncConfig(
        token="secret",
        base_url="https://canvas.test",
        output_dir=str(tmp_path / "downloads"),
        config_path=str(tmp_path / "config"),
    )
