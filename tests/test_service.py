"""Tests for ImageService and extension rules."""

import pytest

from image_store.service import (
    MAX_IMAGE_ID,
    ExtensionNotAllowedError,
    IdGenerationError,
    ImageNotFoundError,
    ImageService,
    generate_image_id,
)
from image_store.storage.base import DirectoryReadError, StorageError
from image_store.validation import extract_extension, is_allowed_extension

ALLOWED = ["jpg", "jpeg", "png"]


def sequence_factory(*ids):
    """ID factory handing out the given IDs in order."""
    it = iter(ids)
    return lambda: next(it)


class TestExtensionRules:

    @pytest.mark.parametrize("filename,expected", [
        ("penguin.png", "png"),
        ("penguin.tar.gz", "gz"),
        ("penguin", "penguin"),
        ("penguin.", ""),
        (".png", "png"),
        ("", ""),
    ])
    def test_extract_extension(self, filename, expected):
        assert extract_extension(filename) == expected

    def test_allow_list_is_case_sensitive(self):
        assert is_allowed_extension("png", ALLOWED)
        assert not is_allowed_extension("PNG", ALLOWED)
        assert not is_allowed_extension("gif", ALLOWED)
        assert not is_allowed_extension("", ALLOWED)

    def test_allow_list_is_checked_by_membership_only(self):
        """Any container works and is not copied or iterated."""
        class MembershipOnly:
            def __contains__(self, item):
                return item == "png"

            def __iter__(self):
                raise AssertionError("allow-list should not be iterated")

        assert is_allowed_extension("png", MembershipOnly())
        assert not is_allowed_extension("gif", MembershipOnly())


class TestGenerateImageId:

    def test_is_non_negative_decimal(self):
        for _ in range(100):
            image_id = generate_image_id()
            assert image_id.isdigit()
            assert 0 <= int(image_id) < MAX_IMAGE_ID


class TestImageService:

    @pytest.fixture
    def service(self, storage_client):
        return ImageService(storage_client, ALLOWED)

    def test_rejects_zero_attempts(self, storage_client):
        with pytest.raises(ValueError):
            ImageService(storage_client, ALLOWED, max_id_attempts=0)

    def test_resolve_extension(self, service):
        assert service.resolve_extension("penguin.jpeg") == "jpeg"

    def test_resolve_extension_rejected(self, service):
        with pytest.raises(ExtensionNotAllowedError):
            service.resolve_extension("penguin.csv")

    def test_save_image(self, storage_client, storage_dir):
        service = ImageService(storage_client, ALLOWED, id_factory=sequence_factory("42"))

        image_id = service.save_image("png", b"content")

        assert image_id == "42"
        assert (storage_dir / "42.png").read_bytes() == b"content"

    def test_save_image_retries_on_collision(self, storage_client, storage_dir):
        """A taken ID is skipped and the existing file is left alone."""
        (storage_dir / "1.jpg").write_bytes(b"existing")
        service = ImageService(
            storage_client, ALLOWED, id_factory=sequence_factory("1", "2")
        )

        image_id = service.save_image("png", b"new")

        assert image_id == "2"
        assert (storage_dir / "1.jpg").read_bytes() == b"existing"
        assert not (storage_dir / "1.png").exists()
        assert (storage_dir / "2.png").read_bytes() == b"new"

    def test_save_image_gives_up(self, storage_client, storage_dir):
        (storage_dir / "1.png").write_bytes(b"existing")
        service = ImageService(
            storage_client, ALLOWED, max_id_attempts=3,
            id_factory=lambda: "1",
        )

        with pytest.raises(IdGenerationError):
            service.save_image("png", b"new")

        assert sorted(p.name for p in storage_dir.iterdir()) == ["1.png"]

    def test_id_generation_error_is_storage_error(self):
        assert issubclass(IdGenerationError, StorageError)

    def test_get_image(self, service, storage_dir):
        (storage_dir / "99.jpeg").write_bytes(b"jpeg data")

        image = service.get_image("99")

        assert image.image_id == "99"
        assert image.filename == "99.jpeg"
        assert image.extension == "jpeg"
        assert image.content == b"jpeg data"
        assert image.content_type == "image/jpeg"

    def test_get_image_not_found(self, service):
        with pytest.raises(ImageNotFoundError):
            service.get_image("99")

    def test_get_image_directory_error(self, service, storage_dir):
        storage_dir.rmdir()

        with pytest.raises(DirectoryReadError):
            service.get_image("99")
