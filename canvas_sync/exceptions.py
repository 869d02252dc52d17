"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class CanvasSyncError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(CanvasSyncError):
    """Raised for issues related to configuration loading or validation."""


class InvalidCourseError(CanvasSyncError):
    """Raised when a course argument is neither an ID nor a course URL."""


class CanvasAPIError(CanvasSyncError):
    """Raised when the Canvas API answers with a non-success status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class AuthenticationError(CanvasAPIError):
    """Raised when the access token is missing, expired or rejected."""


class ListingFetchError(CanvasSyncError):
    """Raised when the file listing of a course cannot be retrieved."""


class DownloadError(CanvasSyncError):
    """Raised when a single file transfer fails."""
