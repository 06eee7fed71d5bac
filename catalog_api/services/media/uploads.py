"""
Staging of multipart uploads.

Each uploaded file is written to the temp directory under a generated storage
name before the product service pairs it with a color. Whatever the service
did not consume is discarded once the request is over.
"""

from __future__ import annotations

import asyncio
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from starlette.datastructures import UploadFile

from catalog_shared.config.logging import media_logger as logger
from catalog_shared.config.settings import settings


@dataclass(frozen=True)
class UploadedFile:
    """A staged upload, valid for the duration of one request."""

    original_name: str
    storage_name: str
    temp_path: Path


class UploadStager:
    """
    Writes incoming UploadFile objects to disk in request order.

    Usage:
        stager = UploadStager(settings.upload_tmp_dir)
        uploads = await stager.stage(files)
        try:
            ...
        finally:
            await stager.discard(uploads)
    """

    def __init__(self, directory: Path | str):
        self._directory = Path(directory)

    async def stage(self, files: Sequence[UploadFile]) -> list[UploadedFile]:
        """Persist every upload to the temp directory; order is preserved."""
        if not files:
            return []

        await asyncio.to_thread(self._directory.mkdir, parents=True, exist_ok=True)

        staged: list[UploadedFile] = []
        try:
            for upload in files:
                storage_name = uuid.uuid4().hex
                temp_path = self._directory / storage_name
                await upload.seek(0)
                await asyncio.to_thread(self._write, upload, temp_path)
                staged.append(
                    UploadedFile(
                        original_name=upload.filename or "",
                        storage_name=storage_name,
                        temp_path=temp_path,
                    )
                )
        except OSError:
            await self.discard(staged)
            raise

        logger.debug("Uploads staged", count=len(staged))
        return staged

    async def discard(self, uploads: Sequence[UploadedFile]) -> int:
        """Remove temp files that are still present. Returns how many were removed."""
        if not uploads:
            return 0
        results = await asyncio.gather(
            *(asyncio.to_thread(self._remove, upload.temp_path) for upload in uploads)
        )
        removed = sum(1 for r in results if r)
        if removed:
            logger.debug("Unused uploads discarded", count=removed)
        return removed

    @staticmethod
    def _write(upload: UploadFile, temp_path: Path) -> None:
        with temp_path.open("wb") as out:
            shutil.copyfileobj(upload.file, out)

    @staticmethod
    def _remove(path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True


def get_upload_stager() -> UploadStager:
    """FastAPI dependency: stager writing to the configured temp directory."""
    return UploadStager(settings.upload_tmp_dir)
