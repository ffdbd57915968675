import binascii
import logging
from typing import Optional

from fastapi import (
    APIRouter,
    Body,
    Depends,
    File,
    Request,
    UploadFile,
)
from starlette.concurrency import run_in_threadpool

from screenshot_api.config.settings import Settings
from screenshot_api.dependencies import get_settings_from_app, get_store
from screenshot_api.errors import (
    InternalError,
    PayloadTooLargeError,
    ScreenshotAPIError,
    ValidationError,
)
from screenshot_api.schemas import Base64UploadRequest, ErrorResponse, UploadResponse
from screenshot_api.storage import (
    DEFAULT_CONTENT_TYPE,
    LocalImageStore,
    StoredImage,
    decode_base64_image,
    is_safe_filename,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing, malformed or oversized image"},
    500: {"model": ErrorResponse, "description": "The image could not be stored"},
}

READ_CHUNK_SIZE = 1024 * 1024


def _too_large(settings: Settings) -> PayloadTooLargeError:
    return PayloadTooLargeError(
        message=f"File size should be less than {settings.max_upload_mb}MB"
    )


def _upload_response(stored: StoredImage) -> UploadResponse:
    return UploadResponse(
        filename=stored.filename,
        url=stored.url,
        size=stored.size,
    )


async def _read_limited(upload: UploadFile, limit: int) -> bytes:
    """Read an uploaded file, giving up as soon as it grows past ``limit`` bytes."""
    data = bytearray()
    while True:
        chunk = await upload.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        data.extend(chunk)
        if len(data) > limit:
            break
    return bytes(data)


@router.post("/api/screenshot", response_model=UploadResponse, responses=ERROR_RESPONSES)
async def upload_screenshot(
    request: Request,
    screenshot: Optional[UploadFile] = File(None, description="The image to store"),
    settings: Settings = Depends(get_settings_from_app),
    store: LocalImageStore = Depends(get_store),
) -> UploadResponse:
    """
    Store a screenshot sent as multipart form data.

    Args:
        screenshot: image file (any `image/*` type) in the `screenshot` field

    Returns:
        UploadResponse: the generated filename, its size and retrieval URL
    """
    logger.info("Screenshot upload request received")

    if screenshot is None:
        form = await request.form()
        received_body = {
            key: value for key, value in form.multi_items() if isinstance(value, str)
        }
        logger.error("No file received in upload request")
        logger.debug(f"Headers: {dict(request.headers)} | Body keys: {list(received_body)}")
        raise ValidationError(
            error="No file received",
            extra={
                "received": {
                    "body": received_body,
                    "headers": dict(request.headers),
                }
            },
        )

    content_type = screenshot.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError(
            error="Only image files are allowed",
            message=f"Unsupported content type: {content_type or 'unknown'}",
        )

    try:
        data = await _read_limited(screenshot, settings.max_upload_bytes)
        if len(data) > settings.max_upload_bytes:
            raise _too_large(settings)

        logger.info(
            f"File info: original name={screenshot.filename!r}, "
            f"size={len(data)}, mimetype={content_type}"
        )
        stored = await run_in_threadpool(store.save, data, None, content_type)
    except ScreenshotAPIError:
        raise
    except Exception as e:
        logger.exception("Error in screenshot upload")
        raise InternalError(message=str(e))
    finally:
        await screenshot.close()

    response = _upload_response(stored)
    logger.info(f"Upload successful: {response.model_dump()}")
    return response


@router.post("/api/screenshot/base64", response_model=UploadResponse, responses=ERROR_RESPONSES)
def upload_screenshot_base64(
    payload: Optional[Base64UploadRequest] = Body(None),
    settings: Settings = Depends(get_settings_from_app),
    store: LocalImageStore = Depends(get_store),
) -> UploadResponse:
    """
    Store a screenshot sent as base64 text inside a JSON body.

    The `image` may carry a `data:image/<type>;base64,` header, which is
    stripped before decoding. When `filename` is omitted a name is generated.
    """
    logger.info("Base64 screenshot upload request received")

    image = payload.image if payload else None
    if not image:
        raise ValidationError(error="No image data received")

    filename = payload.filename
    if filename is not None and not is_safe_filename(filename):
        raise ValidationError(
            error="Invalid filename",
            message="filename must be a plain file name without path separators",
        )

    try:
        data = decode_base64_image(image)
    except (binascii.Error, ValueError) as e:
        logger.error(f"Could not decode base64 image: {e}")
        raise InternalError(message=f"Could not decode image data: {e}")

    if not data:
        raise ValidationError(error="No image data received")
    if len(data) > settings.max_upload_bytes:
        raise _too_large(settings)

    try:
        stored = store.save(data, filename, DEFAULT_CONTENT_TYPE)
    except Exception as e:
        logger.exception("Error in base64 screenshot upload")
        raise InternalError(message=str(e))

    response = _upload_response(stored)
    logger.info(f"Base64 upload successful: {response.model_dump()}")
    return response
