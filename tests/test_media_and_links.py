from io import BytesIO
from types import SimpleNamespace

import pytest
import requests
from PIL import Image

from iftar.errors import AppError
from iftar.services import MediaService
from tests.conftest import auth


def png_bytes(width, height):
    buffer = BytesIO()
    Image.new("RGB", (width, height), color=(200, 120, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_compress_image_resizes_wide_images(app):
    compressed = MediaService.compress_image(png_bytes(2400, 1200))

    image = Image.open(BytesIO(compressed))
    assert image.format == "WEBP"
    assert image.size == (1200, 600)


def test_compress_image_does_not_enlarge(app):
    image = Image.open(BytesIO(MediaService.compress_image(png_bytes(300, 200))))
    assert image.size == (300, 200)


def test_compress_image_rejects_non_images(app):
    with pytest.raises(AppError) as excinfo:
        MediaService.compress_image(b"definitely not an image")
    assert excinfo.value.status_code == 400


def test_upload_endpoint(client, monkeypatch):
    uploaded = {}

    def fake_upload(cls, body, key):
        uploaded["key"] = key
        uploaded["body"] = body
        return f"https://cdn.example.test/{key}"

    monkeypatch.setattr(MediaService, "upload_bytes", classmethod(fake_upload))

    response = client.post(
        "/api/uploads",
        data={"image": (BytesIO(png_bytes(1600, 800)), "iftar.png")},
        content_type="multipart/form-data",
        headers=auth("user-token"),
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["url"] == f"https://cdn.example.test/{uploaded['key']}"
    assert uploaded["key"].startswith("places/") and uploaded["key"].endswith(".webp")
    assert body["compressedSize"] == len(uploaded["body"])


def test_upload_endpoint_rejects_bad_files(client):
    headers = auth("user-token")
    assert client.post("/api/uploads", data={}, content_type="multipart/form-data", headers=headers).status_code == 400
    wrong_type = client.post(
        "/api/uploads",
        data={"image": (BytesIO(b"plain text"), "notes.txt")},
        content_type="multipart/form-data",
        headers=headers,
    )
    assert wrong_type.status_code == 400
    assert client.post("/api/uploads", data={}, content_type="multipart/form-data").status_code == 401


def test_resolve_link(client, monkeypatch):
    calls = []

    def fake_head(url, allow_redirects, timeout):
        calls.append((url, allow_redirects))
        return SimpleNamespace(url="https://www.google.com/maps/place/Al+Fanar/@25.22,55.35,17z")

    monkeypatch.setattr(requests, "head", fake_head)

    response = client.get("/api/resolve-link?url=https://maps.app.goo.gl/abc123")

    assert response.status_code == 200
    assert response.get_json() == {"url": "https://www.google.com/maps/place/Al+Fanar/@25.22,55.35,17z"}
    assert calls == [("https://maps.app.goo.gl/abc123", True)]


@pytest.mark.parametrize(
    "url",
    [
        "",
        "not-a-url",
        "https://example.com/abc",
        "http://169.254.169.254/latest/meta-data",
        "ftp://goo.gl/abc",
    ],
)
def test_resolve_link_allow_list(client, monkeypatch, url):
    def fail_head(*args, **kwargs):
        raise AssertionError("should not be called")

    monkeypatch.setattr(requests, "head", fail_head)
    assert client.get("/api/resolve-link", query_string={"url": url}).status_code == 400


def test_resolve_link_upstream_failure(client, monkeypatch):
    def broken_head(*args, **kwargs):
        raise requests.ConnectionError("boom")

    monkeypatch.setattr(requests, "head", broken_head)

    response = client.get("/api/resolve-link?url=https://goo.gl/xyz")

    assert response.status_code == 502
    assert response.get_json() == {"error": "Failed to resolve link."}
