from fastapi import Request

from screenshot_api.config.settings import Settings
from screenshot_api.storage import LocalImageStore


def get_settings_from_app(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_store(request: Request) -> LocalImageStore:
    """Image store dependency."""
    return request.app.state.store
