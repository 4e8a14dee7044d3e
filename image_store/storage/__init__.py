"""Storage module for image persistence."""

from .base import (
    DirectoryReadError,
    ImageExistsError,
    ImageOpenError,
    ImageReadError,
    ImageWriteError,
    StorageClient,
    StorageError,
)
from .local import LocalStorageClient

__all__ = [
    "StorageClient",
    "LocalStorageClient",
    "StorageError",
    "DirectoryReadError",
    "ImageExistsError",
    "ImageOpenError",
    "ImageReadError",
    "ImageWriteError",
]
