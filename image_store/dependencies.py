"""FastAPI dependency injection configuration."""

import logging

from fastapi import Depends

from config import Settings, get_settings
from image_store.service import ImageService
from image_store.storage.base import StorageClient
from image_store.storage.local import LocalStorageClient

logger = logging.getLogger(__name__)


# Global instance for storage client
_storage_client: StorageClient | None = None


def get_storage_client() -> StorageClient:
    """Get the storage client for image files.

    Only the ``local`` storage type exists; the client is created once and
    reused for every request.

    Returns:
        StorageClient: The configured storage client instance
    """
    global _storage_client

    if _storage_client is None:
        settings = get_settings()
        _storage_client = LocalStorageClient(settings.storage_root)
        logger.info(f"Created local storage client with root: {settings.storage_root}")

    return _storage_client


def get_image_service(
    settings: Settings = Depends(get_settings),
    storage_client: StorageClient = Depends(get_storage_client),
) -> ImageService:
    """Build an ImageService wired to the configured storage and upload rules."""
    return ImageService(
        storage=storage_client,
        allowed_extensions=settings.allowed_extensions,
        max_id_attempts=settings.id_generation_attempts,
    )
