"""
Handles the low-level downloading of course files over HTTP.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles
import aiohttp
from rich.progress import TaskID

from canvas_sync.cli.progress_manager import ProgressManager
from canvas_sync.exceptions import DownloadError
from canvas_sync.utils.path import create_dir

log = logging.getLogger(__name__)


class Downloader:
    """
    Streams a remote file to a local path.

    There is a single attempt per file: a failed transfer raises DownloadError
    and whatever was written is removed.
    """

    CHUNK_SIZE = 262144  # 256 KB

    def __init__(
        self,
        output_dir: Path,
        headers: Optional[dict[str, str]] = None,
        progress_manager: Optional[ProgressManager] = None,
    ):
        self.output_dir = output_dir
        self.headers = headers or {}
        self.progress_manager = progress_manager
        self.bytes_written = 0
        self._session: Optional[aiohttp.ClientSession] = None

    async def _initialize_session(self) -> None:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
            self._session = aiohttp.ClientSession(timeout=timeout, headers=self.headers)

    async def close(self) -> None:
        """Closes the download session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def dispatch(self, url: str, name: str) -> Path:
        """
        Downloads `url` to `<output_dir>/<name>`, creating parent directories.

        Returns:
            The path the file was written to.

        Raises:
            DownloadError: The transfer failed or the file could not be written.
        """
        if not url:
            raise DownloadError(
                f"No download URL for '{name}' (the file may be locked)."
            )
        root = self.output_dir.resolve()
        destination = (self.output_dir / name).resolve()
        if not destination.is_relative_to(root):
            raise DownloadError(
                f"Refusing to write '{name}' outside the output directory."
            )
        await self.download_file(url, destination)
        return destination

    async def download_file(self, url: str, destination_path: Path) -> None:
        """Downloads a single file, updating the progress display if there is one."""
        await self._initialize_session()
        temp_path = destination_path.with_name(destination_path.name + ".part")
        task_id: TaskID | None = None
        if self.progress_manager:
            task_id = self.progress_manager.add_file_task(destination_path.name)

        try:
            create_dir(destination_path.parent)
            async with self._session.get(url, allow_redirects=True) as response:
                response.raise_for_status()
                if self.progress_manager and response.content_length:
                    self.progress_manager.update_task_total(
                        task_id, total=response.content_length
                    )

                bytes_downloaded = 0
                async with aiofiles.open(temp_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                        await f.write(chunk)
                        bytes_downloaded += len(chunk)
                        if self.progress_manager:
                            self.progress_manager.update_task_progress(
                                task_id, completed=bytes_downloaded
                            )

            await asyncio.to_thread(os.replace, temp_path, destination_path)
            self.bytes_written += bytes_downloaded
            if self.progress_manager:
                self.progress_manager.remove_task(task_id, success=True)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            if self.progress_manager:
                self.progress_manager.remove_task(task_id, success=False)
            raise DownloadError(
                f"Failed to download '{destination_path.name}': {e}"
            ) from e
        finally:
            if temp_path.exists():
                try:
                    os.remove(temp_path)
                except OSError:
                    pass
