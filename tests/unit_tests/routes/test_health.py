from datetime import datetime

from fastapi import status
from fastapi.testclient import TestClient


def test_root_reports_status_and_uploads_dir(client: TestClient, uploads_dir):
    response = client.get("/")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["status"] == "Web Audit API Server is running"
    assert body["uploadsDir"] == str(uploads_dir.resolve())
    datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


def test_health(client: TestClient):
    response = client.get("/api/health")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["status"] == "healthy"
    assert "timestamp" in body


def test_uploads_dir_created_on_startup(client: TestClient, uploads_dir):
    assert uploads_dir.is_dir()
