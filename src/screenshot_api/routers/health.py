from datetime import datetime, timezone

from fastapi import APIRouter, Request

from screenshot_api.schemas import HealthResponse, RootResponse

router = APIRouter()


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/", response_model=RootResponse)
async def root(request: Request):
    """Report that the server is up and where it stores uploads."""
    return RootResponse(
        status="Web Audit API Server is running",
        timestamp=_utc_timestamp(),
        uploadsDir=str(request.app.state.store.root),
    )


@router.get("/api/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring API status.
    """
    return HealthResponse(status="healthy", timestamp=_utc_timestamp())
