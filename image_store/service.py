"""Upload and lookup logic on top of a StorageClient."""

import logging
import secrets
from collections.abc import Callable, Iterable

from image_store.schemas import StoredImage
from image_store.storage.base import ImageExistsError, StorageClient, StorageError
from image_store.validation import extract_extension, is_allowed_extension

logger = logging.getLogger(__name__)

# Image IDs are drawn from the non-negative range of a signed 64-bit integer
MAX_IMAGE_ID = 2 ** 63


class ExtensionNotAllowedError(ValueError):
    """The uploaded file's extension is not on the allow-list."""


class ImageNotFoundError(LookupError):
    """No stored file matches the requested ID."""


class IdGenerationError(StorageError):
    """No free image ID was found within the allowed number of attempts."""


def generate_image_id() -> str:
    """Generate a random non-negative integer ID in decimal form."""
    return str(secrets.randbelow(MAX_IMAGE_ID))


class ImageService:
    """Stores uploaded images under fresh IDs and reads them back.

    Args:
        storage: Where image files are kept.
        allowed_extensions: Extensions accepted on upload.
        max_id_attempts: How many IDs to draw before giving up when each
            one collides with an image that is already stored.
        id_factory: Source of candidate IDs.
    """

    def __init__(
        self,
        storage: StorageClient,
        allowed_extensions: Iterable[str],
        max_id_attempts: int = 5,
        id_factory: Callable[[], str] = generate_image_id,
    ):
        if max_id_attempts < 1:
            raise ValueError("max_id_attempts must be at least 1")
        self.storage = storage
        self.allowed_extensions = frozenset(allowed_extensions)
        self.max_id_attempts = max_id_attempts
        self.id_factory = id_factory

    def resolve_extension(self, filename: str) -> str:
        """Return the extension of ``filename`` if it is allowed.

        Raises:
            ExtensionNotAllowedError: If the extension is not on the allow-list.
        """
        extension = extract_extension(filename)
        if not is_allowed_extension(extension, self.allowed_extensions):
            raise ExtensionNotAllowedError(f"Extension not allowed: {extension!r}")
        return extension

    def save_image(self, extension: str, content: bytes) -> str:
        """Persist ``content`` under a newly generated ID.

        Returns:
            str: The ID the image was stored under.

        Raises:
            IdGenerationError: If every candidate ID was already taken.
            StorageError: If the image cannot be written.
        """
        for attempt in range(1, self.max_id_attempts + 1):
            image_id = self.id_factory()
            try:
                filename = self.storage.save_image(image_id, extension, content)
            except ImageExistsError:
                logger.warning(
                    f"Image ID collision on attempt {attempt}/{self.max_id_attempts}: {image_id}"
                )
                continue
            logger.info(f"Stored image {image_id} as {filename} ({len(content)} bytes)")
            return image_id

        raise IdGenerationError(
            f"No free image ID after {self.max_id_attempts} attempts"
        )

    def get_image(self, image_id: str) -> StoredImage:
        """Load the stored image whose base name equals ``image_id``.

        Raises:
            ImageNotFoundError: If no stored file matches.
            StorageError: If the directory or the file cannot be read.
        """
        filename = self.storage.find_image(image_id)
        if filename is None:
            raise ImageNotFoundError(f"Image not found: {image_id}")

        content = self.storage.read_image(filename)
        return StoredImage(
            image_id=image_id,
            filename=filename,
            extension=extract_extension(filename),
            content=content,
        )
