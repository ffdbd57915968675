import logging
import mimetypes

from fastapi import APIRouter, Depends, Path
from fastapi.responses import FileResponse

from screenshot_api.config.settings import Settings
from screenshot_api.dependencies import get_settings_from_app, get_store
from screenshot_api.schemas import ErrorResponse
from screenshot_api.storage import LocalImageStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.api_route(
    "/uploads/{filename}",
    methods=["GET", "HEAD"],
    response_class=FileResponse,
    responses={404: {"model": ErrorResponse, "description": "No such image"}},
)
async def get_upload(
    filename: str = Path(..., description="Name of a stored image"),
    settings: Settings = Depends(get_settings_from_app),
    store: LocalImageStore = Depends(get_store),
):
    """
    Serve a stored image.

    The response carries its own CORS headers on top of the middleware's,
    so images load from any configured origin even without an Origin header.

    Returns:
        FileResponse: the raw file bytes
    """
    file_path = store.resolve(filename)
    logger.debug(f"Serving {file_path}")
    media_type, _ = mimetypes.guess_type(file_path.name)

    return FileResponse(
        file_path,
        media_type=media_type or "application/octet-stream",
        headers={
            "Access-Control-Allow-Origin": settings.cors_response_origin,
            "Cross-Origin-Resource-Policy": "cross-origin",
        },
    )
