"""Response builders shared by the image endpoints."""

from fastapi.responses import JSONResponse, PlainTextResponse, Response

from image_store.schemas import ImageUploadResponse, StoredImage

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def text_response(message: str, status_code: int) -> Response:
    """Plain-text response used for every failure path.

    The body is ``message`` followed by a single newline.
    """
    return PlainTextResponse(
        content=message + "\n",
        status_code=status_code,
        media_type=TEXT_CONTENT_TYPE,
    )


def upload_response(image_id: str) -> Response:
    """201 response carrying the new image ID as JSON."""
    body = ImageUploadResponse(id=image_id)
    return JSONResponse(
        content=body.model_dump(),
        status_code=201,
        media_type=JSON_CONTENT_TYPE,
    )


def image_response(image: StoredImage) -> Response:
    """200 response with the raw image bytes."""
    return Response(
        content=image.content,
        status_code=200,
        media_type=image.content_type,
    )
