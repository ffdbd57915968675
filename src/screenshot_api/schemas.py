####################################
# --- Request/response schemas --- #
####################################

from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)

UPLOAD_SUCCESS_MESSAGE = "Screenshot uploaded successfully"


class RootResponse(BaseModel):
    """Response model for `GET /`."""
    status: str
    timestamp: str = Field(description="Current server time, ISO-8601 UTC.")
    uploadsDir: str = Field(description="Absolute path of the storage root.")


class HealthResponse(BaseModel):
    """Response model for `GET /api/health`."""
    status: str = "healthy"
    timestamp: str


class UploadResponse(BaseModel):
    """Response model for both screenshot upload endpoints."""
    success: bool = True
    filename: str = Field(
        description="Name the image was stored under.",
        json_schema_extra={"example": "screenshot-1718000000000-3f9a1c2b.png"},
    )
    message: str = UPLOAD_SUCCESS_MESSAGE
    url: str = Field(
        description="Relative URL the image can be fetched from.",
        json_schema_extra={"example": "/uploads/screenshot-1718000000000-3f9a1c2b.png"},
    )
    size: int = Field(description="Size of the stored file in bytes.")


class Base64UploadRequest(BaseModel):
    """Request body for `POST /api/screenshot/base64`."""
    image: Optional[str] = Field(
        None,
        description="Base64 image data, optionally prefixed with `data:image/<type>;base64,`.",
    )
    filename: Optional[str] = Field(
        None,
        description="Name to store the image under. Generated when omitted.",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "image": "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg==",
                "filename": "homepage.png",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""
    success: bool = False
    error: str
    message: Optional[str] = None
    available_endpoints: Optional[List[str]] = None

    model_config = ConfigDict(extra="allow")
