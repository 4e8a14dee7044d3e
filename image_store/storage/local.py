"""Local filesystem implementation of StorageClient."""
import logging
from pathlib import Path
from typing import Optional

from config import get_settings

from .base import (
    DirectoryReadError,
    ImageExistsError,
    ImageOpenError,
    ImageReadError,
    ImageWriteError,
    StorageClient,
    StorageError,
)

logger = logging.getLogger(__name__)


class LocalStorageClient(StorageClient):
    """Local filesystem storage implementation.

    Images live side by side in one flat directory, each named
    ``<image_id>.<extension>``. There is no index: lookups list the
    directory and match on the part of the name before the last dot.
    """

    def __init__(self, storage_root: Optional[str | Path] = None):
        """Initialize local storage client.

        Args:
            storage_root: Directory for storing images.
                         If not provided, uses the configured storage root from settings.
        """
        if storage_root is not None:
            self.storage_root = Path(storage_root)
        else:
            self.storage_root = get_settings().storage_root

        self._ensure_storage_dir()
        logger.info(f"Initialized LocalStorageClient with root: {self.storage_root}")

    def _ensure_storage_dir(self) -> None:
        """Ensure the storage directory exists."""
        try:
            self.storage_root.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Ensured storage directory exists: {self.storage_root}")
        except OSError as e:
            logger.error(f"Failed to create storage directory: {e}")
            raise StorageError(f"Failed to create storage directory: {e}")

    def save_image(self, image_id: str, extension: str, content: bytes) -> str:
        """Write image bytes to ``<storage_root>/<image_id>.<extension>``.

        The file is created exclusively, so an existing file is never
        overwritten. A failed write removes whatever was partially written.

        Raises:
            ImageExistsError: If a file for this ID already exists, with any extension.
            ImageWriteError: If the file cannot be created or written.
        """
        existing = self.find_image(image_id)
        if existing is not None:
            raise ImageExistsError(f"Image ID already in use: {existing}")

        filename = f"{image_id}.{extension}"
        file_path = self.storage_root / filename

        try:
            with open(file_path, "xb") as f:
                f.write(content)
        except FileExistsError:
            raise ImageExistsError(f"Image ID already in use: {filename}")
        except OSError as e:
            logger.error(f"Failed to save image {file_path}: {e}")
            file_path.unlink(missing_ok=True)
            raise ImageWriteError(f"Failed to save image: {e}")

        logger.debug(f"Saved image to: {file_path}")
        return filename

    def find_image(self, image_id: str) -> Optional[str]:
        """Scan the storage directory for a file whose base name is ``image_id``.

        Only regular files with a non-empty name before their last dot are
        candidates. If several files match, the lexicographically smallest
        name wins so the result does not depend on directory order.

        Raises:
            DirectoryReadError: If the directory cannot be listed.
        """
        try:
            entries = list(self.storage_root.iterdir())
        except OSError as e:
            logger.error(f"Failed to list storage directory {self.storage_root}: {e}")
            raise DirectoryReadError(f"Failed to read directory: {e}")

        matches = []
        for entry in entries:
            stem, dot, _ = entry.name.rpartition(".")
            if not dot or not stem or stem != image_id:
                continue
            if not entry.is_file():
                continue
            matches.append(entry.name)

        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(f"Multiple files match image {image_id}: {sorted(matches)}")
        return min(matches)

    def read_image(self, filename: str) -> bytes:
        """Read a stored image by file name.

        Raises:
            ImageOpenError: If the file cannot be opened.
            ImageReadError: If reading the opened file fails.
        """
        file_path = self.storage_root / filename

        try:
            f = open(file_path, "rb")
        except OSError as e:
            logger.error(f"Failed to open image {file_path}: {e}")
            raise ImageOpenError(f"Failed to open image: {e}")

        with f:
            try:
                content = f.read()
            except OSError as e:
                logger.error(f"Failed to read image from {file_path}: {e}")
                raise ImageReadError(f"Failed to read image: {e}")

        logger.debug(f"Successfully read image from: {file_path}")
        return content
