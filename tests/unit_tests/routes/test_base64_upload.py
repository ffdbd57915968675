import base64
import re

from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import GENERATED_FILENAME_PATTERN, TEST_PNG_CONTENT

UPLOAD_URL = "/api/screenshot/base64"
ENCODED_PNG = base64.b64encode(TEST_PNG_CONTENT).decode()


def test_base64_upload__happy_path(client: TestClient, uploads_dir):
    response = client.post(UPLOAD_URL, json={"image": ENCODED_PNG})

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Screenshot uploaded successfully"
    assert body["size"] == len(TEST_PNG_CONTENT)
    assert re.match(GENERATED_FILENAME_PATTERN, body["filename"])
    assert body["url"] == f"/uploads/{body['filename']}"
    assert (uploads_dir / body["filename"]).read_bytes() == TEST_PNG_CONTENT


def test_data_url_prefix_stores_same_bytes(client: TestClient, uploads_dir):
    plain = client.post(UPLOAD_URL, json={"image": ENCODED_PNG, "filename": "plain.png"})
    prefixed = client.post(
        UPLOAD_URL,
        json={"image": f"data:image/png;base64,{ENCODED_PNG}", "filename": "prefixed.png"},
    )

    assert plain.status_code == prefixed.status_code == status.HTTP_200_OK
    assert plain.json()["size"] == prefixed.json()["size"]
    assert (uploads_dir / "plain.png").read_bytes() == (uploads_dir / "prefixed.png").read_bytes()


def test_client_supplied_filename(client: TestClient):
    response = client.post(UPLOAD_URL, json={"image": ENCODED_PNG, "filename": "homepage.png"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["filename"] == "homepage.png"
    assert response.json()["url"] == "/uploads/homepage.png"

    fetched = client.get("/uploads/homepage.png")
    assert fetched.content == TEST_PNG_CONTENT


def test_missing_image(client: TestClient):
    response = client.post(UPLOAD_URL, json={"filename": "x.png"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"success": False, "error": "No image data received"}


def test_empty_image(client: TestClient):
    response = client.post(UPLOAD_URL, json={"image": ""})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "No image data received"


def test_missing_body(client: TestClient):
    response = client.post(UPLOAD_URL)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["success"] is False


def test_malformed_json_body(client: TestClient):
    response = client.post(
        UPLOAD_URL,
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["success"] is False


def test_path_in_filename_is_rejected(client: TestClient, uploads_dir, tmp_path):
    response = client.post(UPLOAD_URL, json={"image": ENCODED_PNG, "filename": "../escape.png"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Invalid filename"
    assert not (tmp_path / "escape.png").exists()


def test_undecodable_image_is_internal_error(client: TestClient, uploads_dir):
    response = client.post(UPLOAD_URL, json={"image": "a"})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Internal server error"
    assert list(uploads_dir.iterdir()) == []


def test_oversized_image(client: TestClient, uploads_dir):
    encoded = base64.b64encode(b"\x00" * (10 * 1024 * 1024 + 1)).decode()

    response = client.post(UPLOAD_URL, json={"image": encoded})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "File size should be less than 10MB"
    assert list(uploads_dir.iterdir()) == []


def test_write_failure_is_internal_error(client: TestClient, monkeypatch):
    def broken_save(*args, **kwargs):
        raise PermissionError("read-only file system")

    monkeypatch.setattr(client.app.state.store, "save", broken_save)

    response = client.post(UPLOAD_URL, json={"image": ENCODED_PNG})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "read-only file system"


def test_urlsafe_base64_stores_exact_bytes(client: TestClient, uploads_dir):
    raw = b"\xfb\xff\xbf\x00\x01\x02" + TEST_PNG_CONTENT
    encoded = base64.urlsafe_b64encode(raw).decode()
    assert "-" in encoded and "_" in encoded

    response = client.post(UPLOAD_URL, json={"image": encoded, "filename": "urlsafe.png"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["size"] == len(raw)
    assert (uploads_dir / "urlsafe.png").read_bytes() == raw
