"""
Pydantic models for Canvas API payloads and the persisted download records.
"""

from pydantic import BaseModel, ConfigDict, field_validator


class CourseFile(BaseModel):
    """One entry of a course's file listing."""

    model_config = ConfigDict(extra="ignore")

    id: int
    display_name: str
    folder_id: int | None = None
    url: str = ""

    @field_validator("url", mode="before")
    @classmethod
    def null_url_to_empty(cls, v: str | None) -> str:
        # Locked files come back with a null url.
        return v or ""


class Folder(BaseModel):
    """A folder as returned by the folders endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    name: str
    parent_folder_id: int | None = None


class FileRecord(BaseModel):
    """
    A file that has been handed to the downloader.

    `time` is the local POSIX timestamp taken when the download was dispatched.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    time: float = 0.0

    def to_storage(self) -> dict[str, str | float]:
        """The per-entry shape kept in the store (the ID is the mapping key)."""
        return {"name": self.name, "time": self.time}
