"""Application fixtures for tests."""
import pytest
from fastapi.testclient import TestClient

from screenshot_api.config.settings import Settings
from screenshot_api.main import create_app
from screenshot_api.storage import LocalImageStore


@pytest.fixture
def uploads_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(uploads_dir) -> Settings:
    return Settings(uploads_dir=str(uploads_dir), _env_file=None)


@pytest.fixture
def store(uploads_dir) -> LocalImageStore:
    return LocalImageStore(uploads_dir)


@pytest.fixture
def client(settings) -> TestClient:
    app = create_app(settings=settings)
    with TestClient(app) as client:
        yield client
