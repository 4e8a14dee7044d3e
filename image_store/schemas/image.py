"""Image-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ImageUploadResponse(BaseModel):
    """Response model for a successful image upload.

    The ``id`` is the decimal form of a random non-negative integer and is
    the only handle a client gets for fetching the image back from
    ``/image/<id>``.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"id": "5577006791947779410"}
            ]
        }
    )

    id: str = Field(
        ...,
        description="Identifier of the stored image, in decimal digits.",
        min_length=1,
        pattern=r"^[0-9]+$",
        examples=["5577006791947779410", "8674665223082153551"],
    )


class StoredImage(BaseModel):
    """An image read back from storage."""

    image_id: str
    filename: str
    extension: str
    content: bytes

    @property
    def content_type(self) -> str:
        """Media type derived literally from the stored extension."""
        return f"image/{self.extension}"
