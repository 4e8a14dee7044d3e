"""Storage client interface for image persistence."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class StorageClient(Protocol):
    """Abstract interface for image storage operations.

    Images are addressed by an ID plus the extension they were uploaded
    with. Callers only know the ID when reading back, so implementations
    must be able to resolve an ID to the stored file name on their own.
    """

    def save_image(self, image_id: str, extension: str, content: bytes) -> str:
        """Save image content under ``<image_id>.<extension>``.

        Args:
            image_id: Identifier used as the file's base name.
            extension: Extension the file is stored with.
            content: Raw image bytes to store.

        Returns:
            str: Name of the stored file.

        Raises:
            ImageExistsError: If an image with this ID is already stored.
            ImageWriteError: If the image cannot be written.
        """
        ...

    def find_image(self, image_id: str) -> Optional[str]:
        """Resolve an image ID to the name of the stored file.

        Args:
            image_id: Identifier to look up.

        Returns:
            Optional[str]: The stored file name, or None if nothing matches.

        Raises:
            DirectoryReadError: If the storage location cannot be listed.
        """
        ...

    def read_image(self, filename: str) -> bytes:
        """Read a stored image.

        Args:
            filename: Stored file name as returned by ``find_image``.

        Returns:
            bytes: Raw image content.

        Raises:
            ImageOpenError: If the file cannot be opened.
            ImageReadError: If the file was opened but cannot be read.
        """
        ...


class StorageError(Exception):
    """Base exception for storage-related errors."""
    pass


class DirectoryReadError(StorageError):
    """The storage directory could not be listed."""


class ImageExistsError(StorageError):
    """An image with the requested ID is already stored."""


class ImageWriteError(StorageError):
    """An image could not be written to storage."""


class ImageOpenError(StorageError):
    """A stored image could not be opened."""


class ImageReadError(StorageError):
    """A stored image was opened but could not be read."""
