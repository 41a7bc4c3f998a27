"""
Docs Wallet Backend — Upload Staging Service
=============================================

What:  Writes incoming multipart payloads to a temporary staging directory
       and removes them once the request is done.
How:   Async file I/O (aiofiles) into `<staging_root>/<uuid><ext>`; the
       object store uploads from these paths.
Who:   ImageService.upload_images() stages every file, then always cleans up.

Staged files are ephemeral: they exist only between the multipart read and
the end of the object-store fan-out. Nothing else references them.

    staging/
    ├── 0b6c1a8e9f4d4c3b8a7e6d5c4b3a2910.jpg
    └── 5e4d3c2b1a09487f8e7d6c5b4a392817.png

UUID file names keep concurrent requests from colliding and keep
client-supplied names out of the file system path.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import aiofiles

from docs_wallet.exceptions import ObjectStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedFile:
    """A payload written to the staging directory."""

    path: str
    filename: str
    size: int


class FileService:
    """
    Manages the staging lifecycle of uploaded files.

    Lifecycle of an uploaded file:
        1. Route reads the multipart part into memory
        2. stage() writes it under a UUID name
        3. ObjectStore.upload() reads it from disk
        4. cleanup() deletes it, whether the upload worked or not
    """

    def __init__(self, staging_root: str):
        self.staging_root = Path(staging_root).resolve()
        self.staging_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with staging_root=%s", self.staging_root)

    def _staging_path(self, filename: str) -> Path:
        ext = Path(filename).suffix.lower()
        return self.staging_root / f"{uuid.uuid4().hex}{ext}"

    async def stage(self, filename: str, content: bytes) -> StagedFile:
        """
        Write `content` to a fresh staging file.

        Raises:
            ObjectStoreError: the staging directory is not writable. The client
            only sees the generic upload failure message.
        """
        path = self._staging_path(filename)
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to stage %s at %s: %s", filename, path, e)
            raise ObjectStoreError(
                message="Failed to upload files.",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.debug("Staged %s (%d bytes) at %s", filename, len(content), path.name)
        return StagedFile(path=str(path), filename=filename, size=len(content))

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a staged file. Missing files are ignored.

        Failures are logged at WARNING and not raised: the upload result has
        already been decided by the time cleanup runs.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.debug("Cleaned up staged file: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up staged file %s: %s", file_path, e)

    async def cleanup(self, staged: Iterable[StagedFile]) -> None:
        for item in staged:
            await self.cleanup_file(item.path)
