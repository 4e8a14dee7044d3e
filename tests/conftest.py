"""Shared fixtures for the image store tests."""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from config import Settings, get_settings
from image_store.dependencies import get_storage_client
from image_store.main import app
from image_store.storage import LocalStorageClient


@pytest.fixture
def make_image():
    """Factory producing small real images.

    Returns:
        Callable taking ``fmt`` ("PNG" or "JPEG"), ``size`` and ``seed``
        and returning encoded image bytes.
    """
    def _make(fmt: str = "PNG", size: tuple[int, int] = (10, 10), seed: int = 0) -> bytes:
        color = ((seed * 50) % 256, (seed * 100) % 256, (seed * 150) % 256)
        img = Image.new("RGB", size, color=color)
        img_bytes = io.BytesIO()
        img.save(img_bytes, format=fmt)
        return img_bytes.getvalue()

    return _make


@pytest.fixture
def storage_dir(tmp_path):
    """Empty storage directory for one test."""
    path = tmp_path / "images"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(storage_dir):
    """Settings pointing at the temporary storage directory, ignoring any .env file."""
    return Settings(_env_file=None, storage_root=storage_dir)


@pytest.fixture
def storage_client(storage_dir):
    """LocalStorageClient rooted at the temporary storage directory."""
    return LocalStorageClient(storage_root=storage_dir)


@pytest.fixture
def client(test_settings, storage_client):
    """Test client whose dependencies use the temporary storage directory."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_storage_client] = lambda: storage_client
    yield TestClient(app)
    app.dependency_overrides.clear()
