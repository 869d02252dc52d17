"""
Utilities for handling local file paths and course URL parsing.
"""

import logging
import re
from pathlib import Path

from pathvalidate import is_valid_filepath

from canvas_sync.exceptions import InvalidCourseError

log = logging.getLogger(__name__)

# Characters Windows (and the browser downloaders) refuse in a path segment.
_UNSAFE_CHARS = re.compile(r'[:*?"<>|\\]')

_COURSE_URL = re.compile(r"courses/(?P<id>\d+)")


def sanitize_path(path: str) -> str:
    """
    Replaces each of `: * ? " < > | \\` with an underscore.

    Nothing else is touched: slashes stay as separators and the name keeps its
    spacing and case.
    """
    return _UNSAFE_CHARS.sub("_", path)


def build_local_path(course_folder: str, folder_path: str, display_name: str) -> str:
    """Joins `<course_folder>/<folder_path><display_name>` and sanitizes it."""
    local_path = sanitize_path(f"{course_folder}/{folder_path}{display_name}")
    if not is_valid_filepath(local_path, platform="auto"):
        log.warning(
            f"[yellow]Path '{local_path}' may not be writable on this platform."
            "[/yellow]"
        )
    return local_path


def parse_course_id(course: str) -> str:
    """
    Accepts a bare numeric course ID or any URL containing `/courses/<id>`.
    """
    course = course.strip()
    if course.isdigit():
        return course
    match = _COURSE_URL.search(course)
    if match:
        return match.group("id")
    raise InvalidCourseError(
        f"'{course}' is not a course ID or a Canvas course URL."
    )


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)
