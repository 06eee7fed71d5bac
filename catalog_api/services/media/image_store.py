"""
Permanent storage for product images.

Images live as plain files in one directory (``settings.product_image_dir``).
Blocking filesystem calls run in worker threads so a request can copy several
uploads concurrently.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Iterable

from catalog_shared.config.logging import media_logger as logger
from catalog_shared.config.settings import settings
from catalog_shared.utils.exceptions import ImageStorageError
from catalog_shared.utils.validators import file_extension, is_plain_filename
from .uploads import UploadedFile


class ImageStore:
    """
    Directory of product images addressed by bare filename.

    Usage:
        store = ImageStore(settings.product_image_dir)
        filename = await store.store(upload)
        await store.remove_many(["a1b2.png"])
    """

    def __init__(self, directory: Path | str):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def ensure_directory(self) -> None:
        """Create the image directory if it does not exist yet."""
        self._directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        """Absolute path of an image; rejects names with directory parts."""
        if not is_plain_filename(filename):
            raise ValueError(f"Not a plain filename: {filename!r}")
        return self._directory / filename

    def filenames(self) -> set[str]:
        """Names of the files currently in the image directory."""
        if not self._directory.is_dir():
            return set()
        return {path.name for path in self._directory.iterdir() if path.is_file()}

    @staticmethod
    def permanent_name(upload: UploadedFile) -> str:
        """``<storage-name>.<original-extension>``"""
        extension = file_extension(upload.original_name)
        if not extension:
            return upload.storage_name
        return f"{upload.storage_name}.{extension}"

    async def store(self, upload: UploadedFile) -> str:
        """
        Copy a staged upload into the image directory and drop the temp file.

        Returns the permanent filename. Raises ImageStorageError when the copy
        fails; nothing is left behind in the image directory in that case.
        """
        filename = self.permanent_name(upload)
        target = self.path_for(filename)

        try:
            await asyncio.to_thread(self._copy, upload.temp_path, target)
        except OSError as exc:
            raise ImageStorageError(filename, source=str(upload.temp_path), error=str(exc)) from exc

        try:
            await asyncio.to_thread(upload.temp_path.unlink)
        except OSError as exc:
            await asyncio.to_thread(target.unlink, True)
            raise ImageStorageError(filename, source=str(upload.temp_path), error=str(exc)) from exc

        logger.debug("Image stored", filename=filename, original=upload.original_name)
        return filename

    def remove(self, filename: str) -> bool:
        """
        Delete an image if it exists. Best effort: a missing file is logged,
        not raised. Returns True when a file was deleted.
        """
        if not is_plain_filename(filename):
            logger.warning("Refusing to delete image outside the image directory", filename=filename)
            return False

        path = self.path_for(filename)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.info("Image not found on disk", filename=filename, path=str(path))
            return False
        except OSError as exc:
            logger.warning("Could not delete image", filename=filename, error=str(exc))
            return False

        logger.info("Image deleted", filename=filename)
        return True

    async def remove_many(self, filenames: Iterable[str]) -> int:
        """Delete several images concurrently. Returns how many were deleted."""
        names = [name for name in filenames if name]
        if not names:
            return 0
        results = await asyncio.gather(
            *(asyncio.to_thread(self.remove, name) for name in names)
        )
        return sum(1 for removed in results if removed)

    def _copy(self, source: Path, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copyfile(source, target)
        except OSError:
            target.unlink(missing_ok=True)
            raise


def get_image_store() -> ImageStore:
    """FastAPI dependency: image store rooted at the configured directory."""
    return ImageStore(settings.product_image_dir)
