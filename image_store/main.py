import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from config import Settings, get_settings
from image_store.dependencies import get_image_service
from image_store.multipart import MultipartFormError, parse_multipart_form
from image_store.responses import image_response, text_response, upload_response
from image_store.service import (
    ExtensionNotAllowedError,
    ImageNotFoundError,
    ImageService,
)
from image_store.storage.base import (
    DirectoryReadError,
    ImageOpenError,
    ImageReadError,
    StorageError,
)

# Get settings and configure logging before anything else
settings = get_settings()
settings.configure_logging()

logger = logging.getLogger(__name__)

# Both image routes accept every method; the upload route rejects non-POST itself
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Storage type: {settings.storage_type}")
    logger.info(f"Storage root: {settings.storage_root}")

    settings.storage_root.mkdir(parents=True, exist_ok=True)

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, str]:
    """Simple health-check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": settings.app_version,
    }


@app.get("/config")
def get_config() -> dict[str, Any]:
    """Get current configuration (non-sensitive values only)."""
    return {
        "app_name": settings.app_name,
        "app_version": settings.app_version,
        "environment": settings.environment,
        "debug": settings.debug,
        "storage_type": settings.storage_type,
        "storage_root": str(settings.storage_root),
        "allowed_extensions": settings.allowed_extensions,
        "upload_field_name": settings.upload_field_name,
        "max_upload_size": settings.max_upload_size,
        "log_level": settings.log_level,
        "log_json": settings.log_json,
    }


@app.api_route("/image", methods=ALL_METHODS, tags=["images"])
async def upload_image(
    request: Request,
    app_settings: Settings = Depends(get_settings),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """Store an uploaded image and return its new ID.

    Expects a multipart/form-data POST whose file field carries the image.
    The extension of the advisory filename decides whether the upload is
    accepted and which extension the stored file gets.

    Returns:
        Response: 201 with ``{"id": "<digits>"}`` on success, otherwise a
        plain-text error (405, 400 or 500).
    """
    if request.method != "POST":
        return text_response("Method not allowed", 405)

    try:
        form = await parse_multipart_form(request, app_settings.max_upload_size)
    except MultipartFormError as e:
        return text_response(f"Bad Request: {e}", 400)

    try:
        upload = form.get(app_settings.upload_field_name)
        if not isinstance(upload, UploadFile):
            logger.warning(f"Upload without file field {app_settings.upload_field_name!r}")
            return text_response("Bad Request: Missing file field", 400)

        try:
            extension = image_service.resolve_extension(upload.filename or "")
        except ExtensionNotAllowedError as e:
            logger.warning(f"Rejected upload {upload.filename!r}: {e}")
            return text_response("Bad Request: Extension not allowed", 400)

        try:
            content = await upload.read()
        except OSError as e:
            logger.error(f"Failed to read uploaded file {upload.filename!r}: {e}")
            return text_response("Internal Server Error: File can not be created", 500)
    finally:
        await form.close()

    try:
        image_id = await run_in_threadpool(image_service.save_image, extension, content)
    except StorageError as e:
        logger.error(f"Failed to store upload {upload.filename!r}: {e}")
        return text_response("Internal Server Error: File can not be created", 500)

    return upload_response(image_id)


@app.api_route("/image/{image_id:path}", methods=ALL_METHODS, tags=["images"])
def get_image(
    image_id: str,
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """Serve the stored image whose file name, minus extension, equals ``image_id``.

    Any method is served the same way and request bodies are ignored.
    """
    try:
        image = image_service.get_image(image_id)
    except DirectoryReadError:
        return text_response("Internal Server Error: Directory can not be read", 500)
    except ImageNotFoundError:
        logger.info(f"Image not found: {image_id}")
        return text_response("Not Found: File not found", 404)
    except ImageOpenError:
        return text_response("Internal Server Error: File can not be opened", 500)
    except ImageReadError:
        return text_response("Internal Server Error: File can not be read", 500)

    logger.info(f"Serving image {image_id} from {image.filename}")
    return image_response(image)
