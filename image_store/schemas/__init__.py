"""Pydantic schemas for request/response validation."""

from .image import ImageUploadResponse, StoredImage

__all__ = [
    "ImageUploadResponse",
    "StoredImage",
]
