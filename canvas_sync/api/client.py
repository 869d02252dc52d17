"""
Async client for the two Canvas REST endpoints the sync needs.
"""

import logging
import time
from typing import Any, Optional

import aiohttp
from pydantic import ValidationError

from canvas_sync.exceptions import AuthenticationError, CanvasAPIError
from canvas_sync.models.records import CourseFile, Folder

log = logging.getLogger(__name__)


class CanvasAPIClient:
    """
    Minimal async client for the Canvas LMS REST API (v1).

    Only one page of the file listing is ever requested; Canvas caps a page at
    100 entries.
    """

    API_PREFIX = "/api/v1/"

    def __init__(self, base_url: str, token: str, per_page: int = 100):
        """
        Initializes the API client.

        Args:
            base_url: Root of the Canvas instance, e.g. https://oc.sjtu.edu.cn.
            token: A Canvas personal access token.
            per_page: Page size requested from the file listing endpoint.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.per_page = per_page
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def auth_headers(self) -> dict[str, str]:
        """Headers that authorize a request against this Canvas instance."""
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Accept": "application/json", **self.auth_headers},
                timeout=aiohttp.ClientTimeout(total=60, connect=15, sock_read=30),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "CanvasAPIClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def api_call(self, endpoint: str, **params: Any) -> Any:
        """
        Performs a GET against `/api/v1/<endpoint>` and returns the decoded JSON.

        Raises:
            AuthenticationError: The token was rejected (401).
            CanvasAPIError: Any other non-200 status.
        """
        await self._initialize_session()
        url = self.base_url + self.API_PREFIX + endpoint
        start_time = time.monotonic()

        async with self._session.get(url, params=params or None) as r:
            duration_ms = (time.monotonic() - start_time) * 1000
            log.debug(f"GET {endpoint} -> {r.status} ({duration_ms:.0f} ms)")

            if r.status == 401:
                raise AuthenticationError(
                    "Canvas rejected the access token.", status=r.status
                )
            if r.status != 200:
                raise CanvasAPIError(
                    f"GET {endpoint} failed with status {r.status}.", status=r.status
                )
            try:
                return await r.json(content_type=None)
            except ValueError as e:
                raise CanvasAPIError(
                    f"GET {endpoint} returned a non-JSON body.", status=r.status
                ) from e

    # Public API Methods
    async def fetch_course_files(self, course_id: str) -> list[CourseFile]:
        """Returns the first page of a course's flat file listing."""
        payload = await self.api_call(
            f"courses/{course_id}/files", per_page=self.per_page
        )
        if not isinstance(payload, list):
            raise CanvasAPIError(
                f"Unexpected file listing payload for course {course_id}."
            )
        try:
            return [CourseFile.model_validate(item) for item in payload]
        except ValidationError as e:
            raise CanvasAPIError(f"Malformed file listing entry: {e}") from e

    async def fetch_folder(self, folder_id: int) -> Folder:
        payload = await self.api_call(f"folders/{folder_id}")
        try:
            return Folder.model_validate(payload)
        except ValidationError as e:
            raise CanvasAPIError(f"Malformed folder {folder_id}: {e}") from e
