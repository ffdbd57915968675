from textwrap import dedent
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from screenshot_api.errors import (
    AVAILABLE_ENDPOINTS,
    ScreenshotAPIError,
    handle_broad_exceptions,
    handle_http_exceptions,
    handle_request_validation_errors,
    handle_screenshot_api_errors,
)
from screenshot_api.routers.health import router as health_router
from screenshot_api.routers.screenshots import router as screenshots_router
from screenshot_api.routers.uploads import router as uploads_router
from screenshot_api.config.settings import Settings
from screenshot_api.storage import LocalImageStore

# Set up logging
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="Screenshot API",
        summary="Receive screenshots and serve them back",
        version="v1",
        description=dedent(
            """\
        Accepts screenshots from the browser extension either as multipart
        uploads or as base64 JSON, stores them on local disk and returns a
        URL they can be fetched from.

        | Endpoint | Notes |
        | --- | --- |
        | `POST /api/screenshot` | multipart field `screenshot`, `image/*` only |
        | `POST /api/screenshot/base64` | JSON `{image, filename?}` |
        | `GET /uploads/{filename}` | raw image bytes |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    # CORS wraps the broad exception handler
    app.middleware("http")(handle_broad_exceptions)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    store = LocalImageStore(settings.uploads_dir)
    store.ensure_root()
    app.state.settings = settings
    app.state.store = store
    logger.info(f"Uploads directory: {store.root}")

    app.include_router(health_router, tags=["health"])
    app.include_router(screenshots_router, tags=["screenshots"])
    app.include_router(uploads_router, tags=["uploads"])

    app.add_exception_handler(
        exc_class_or_status_code=ScreenshotAPIError,
        handler=handle_screenshot_api_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=StarletteHTTPException,
        handler=handle_http_exceptions,
    )

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


def log_startup_banner(settings: Settings) -> None:
    logger.info(f"Screenshot API Server running on port {settings.port}")
    logger.info(f"Uploads directory: {LocalImageStore(settings.uploads_dir).root}")
    logger.info("Available endpoints:")
    for endpoint in AVAILABLE_ENDPOINTS:
        method, path = endpoint.split(" ", 1)
        logger.info(f"   {method:<4} http://localhost:{settings.port}{path}")


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    log_startup_banner(settings)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)
