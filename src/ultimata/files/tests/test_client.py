"""Tests for the blob storage client."""

import httpx
import pytest

from ultimata.files.client import BlobStorageClient, BlobStorageError, BlobStorageUnavailable, UploadResult


def client_with(handler) -> BlobStorageClient:
    return BlobStorageClient(
        base_url="http://blob.test/api",
        token="secret-token",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


class TestUpload:
    def test_upload_posts_multipart_with_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = request.read()
            return httpx.Response(200, json={"fileId": "abc123", "name": "combo.txt", "size": 11})

        result = client_with(handler).upload("combo.txt", b"hello world")

        assert result == UploadResult(file_id="abc123", name="combo.txt", size=11)
        assert seen["url"] == "http://blob.test/api/files/"
        assert seen["auth"] == "Bearer secret-token"
        assert b"hello world" in seen["body"]
        assert b'filename="combo.txt"' in seen["body"]

    def test_error_response_raises(self):
        def handler(request):
            return httpx.Response(413, json={"message": "File too large"})

        with pytest.raises(BlobStorageError) as exc_info:
            client_with(handler).upload("big.bin", b"x")

        assert exc_info.value.message == "File too large"
        assert exc_info.value.status_code == 413

    def test_non_json_error_response(self):
        def handler(request):
            return httpx.Response(500, text="oops")

        with pytest.raises(BlobStorageError) as exc_info:
            client_with(handler).upload("a.txt", b"x")

        assert "500" in exc_info.value.message

    def test_transport_failure_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BlobStorageUnavailable):
            client_with(handler).upload("a.txt", b"x")


class TestDownloadLink:
    def test_returns_url(self):
        def handler(request):
            assert request.url.path == "/api/files/abc123/link/"
            return httpx.Response(200, json={"url": "https://cdn.test/abc123?sig=1"})

        assert client_with(handler).get_download_link("abc123") == "https://cdn.test/abc123?sig=1"

    def test_unknown_file(self):
        def handler(request):
            return httpx.Response(404, json={"message": "No such file"})

        with pytest.raises(BlobStorageError):
            client_with(handler).get_download_link("missing")


def test_defaults_come_from_settings(settings):
    settings.BLOB_STORAGE_URL = "http://files.internal/api"
    settings.BLOB_STORAGE_TOKEN = "from-settings"
    settings.BLOB_STORAGE_TIMEOUT = 12.0

    client = BlobStorageClient()

    assert client.base_url == "http://files.internal/api"
    assert client.token == "from-settings"
    assert client.timeout == 12.0
