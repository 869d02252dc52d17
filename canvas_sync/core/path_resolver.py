"""
Resolves a folder ID into the slash-separated path of its ancestors.
"""

import asyncio
import logging

import aiohttp

from canvas_sync.api.client import CanvasAPIClient
from canvas_sync.exceptions import CanvasAPIError
from canvas_sync.models.stats import SyncStats

log = logging.getLogger(__name__)


class FolderPathResolver:
    """
    Walks `parent_folder_id` links up to the top folder, memoizing every
    folder it resolves.

    Paths carry a trailing slash (`"course files/Week 1/"`); a file without a
    folder resolves to `""`. A folder whose lookup fails contributes nothing to
    the path and is not cached, so the sync carries on with a shorter path.
    """

    def __init__(
        self,
        api_client: CanvasAPIClient,
        cache: dict[int, str] | None = None,
        stats: SyncStats | None = None,
    ):
        self.api_client = api_client
        self.cache = cache if cache is not None else {}
        self.stats = stats

    async def resolve(self, folder_id: int | None) -> str:
        if folder_id is None:
            return ""
        if folder_id in self.cache:
            return self.cache[folder_id]

        try:
            folder = await self.api_client.fetch_folder(folder_id)
        except (CanvasAPIError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.error(f"[red]Failed to fetch folder {folder_id}: {e}[/red]")
            if self.stats:
                self.stats.folders_failed += 1
            return ""

        if self.stats:
            self.stats.folders_fetched += 1
        parent_path = await self.resolve(folder.parent_folder_id)
        full_path = f"{parent_path}{folder.name}/"
        self.cache[folder_id] = full_path
        return full_path
