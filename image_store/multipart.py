"""Size-capped multipart/form-data parsing."""

import logging

from starlette.datastructures import FormData, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser
from starlette.requests import Request

logger = logging.getLogger(__name__)

# Room for boundaries, part headers and small text fields on top of the file limit
MULTIPART_OVERHEAD = 64 * 1024


class MultipartFormError(Exception):
    """The request body is not a usable multipart form."""


async def read_body(request: Request, max_size: int) -> bytes:
    """Read the request body, refusing anything larger than ``max_size`` bytes.

    The declared Content-Length is checked first so oversized uploads are
    rejected without being read. Chunked bodies are counted as they arrive.
    """
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > max_size:
        raise MultipartFormError(f"request body too large (limit {max_size} bytes)")

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_size:
            raise MultipartFormError(f"request body too large (limit {max_size} bytes)")
    return bytes(body)


async def parse_multipart_form(request: Request, max_size: int) -> FormData:
    """Parse a multipart/form-data request whose files are at most ``max_size`` bytes each.

    The body as a whole may exceed ``max_size`` by ``MULTIPART_OVERHEAD``
    to leave room for the multipart framing around a file of exactly
    ``max_size`` bytes.

    Args:
        request: Incoming request.
        max_size: Maximum size of any uploaded file in bytes.

    Returns:
        FormData: Parsed fields. Callers must ``await form.close()`` when done.

    Raises:
        MultipartFormError: If the body is not multipart, lacks a boundary,
            is malformed, or a file or the body is too large.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise MultipartFormError("request Content-Type isn't multipart/form-data")
    if "boundary=" not in content_type:
        raise MultipartFormError("no multipart boundary param in Content-Type")

    body = await read_body(request, max_size + MULTIPART_OVERHEAD)

    async def body_stream():
        yield body

    parser = MultiPartParser(request.headers, body_stream())
    try:
        form = await parser.parse()
    except (MultiPartException, ValueError) as e:
        # python-multipart parse errors derive from ValueError
        logger.warning(f"Rejected malformed multipart body: {e}")
        raise MultipartFormError(str(e) or "malformed multipart body")

    for field, value in form.multi_items():
        if isinstance(value, UploadFile) and (value.size or 0) > max_size:
            await form.close()
            logger.warning(f"Rejected oversized file in field {field!r}: {value.size} bytes")
            raise MultipartFormError(f"file too large (limit {max_size} bytes)")

    logger.debug(f"Parsed multipart form with {len(form)} field(s), {len(body)} bytes")
    return form
