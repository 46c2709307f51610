"""HTTP client for the blob storage service.

Product files (combo lists) are stored outside the database. The shop
only keeps the opaque file id returned by ``upload`` and asks the service
for a short-lived download link when a buyer requests the file.
"""

import logging
from dataclasses import dataclass

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)


class BlobStorageError(Exception):
    """Error response from the blob storage service."""

    def __init__(self, message: str, status_code: int | None = None, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class BlobStorageUnavailable(Exception):
    """Blob storage service could not be reached."""

    pass


@dataclass
class UploadResult:
    """Result from a file upload."""

    file_id: str
    name: str
    size: int


def _handle_response(response: httpx.Response) -> dict:
    """Return the JSON body of a successful response or raise."""
    if response.is_success:
        return response.json()

    try:
        error_data = response.json()
    except ValueError:
        error_data = {}
    message = error_data.get("message") or f"Blob storage returned HTTP {response.status_code}"
    raise BlobStorageError(message, status_code=response.status_code, details=error_data.get("details"))


class BlobStorageClient:
    """Thin client over the blob storage REST API.

    Settings:
        BLOB_STORAGE_URL: Base URL, e.g. https://files.example.com/api
        BLOB_STORAGE_TOKEN: Bearer token
        BLOB_STORAGE_TIMEOUT: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url if base_url is not None else settings.BLOB_STORAGE_URL
        self.token = token if token is not None else settings.BLOB_STORAGE_TOKEN
        self.timeout = timeout if timeout is not None else settings.BLOB_STORAGE_TIMEOUT
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=headers,
            transport=self.transport,
        )

    def upload(self, name: str, data: bytes) -> UploadResult:
        """Store ``data`` under ``name``.

        Raises:
            BlobStorageError: Service rejected the upload
            BlobStorageUnavailable: Service unreachable
        """
        try:
            with self._get_client() as client:
                response = client.post("/files/", files={"file": (name, data)})
                body = _handle_response(response)
        except httpx.RequestError as e:
            logger.error("Blob storage unavailable: %s", e)
            raise BlobStorageUnavailable(str(e)) from e

        result = UploadResult(
            file_id=str(body["fileId"]),
            name=body.get("name", name),
            size=int(body.get("size", len(data))),
        )
        logger.info("Uploaded file to blob storage", extra={"file_id": result.file_id, "size": result.size})
        return result

    def get_download_link(self, file_id: str) -> str:
        """Return a download URL for ``file_id``.

        Raises:
            BlobStorageError: Unknown file or service error
            BlobStorageUnavailable: Service unreachable
        """
        try:
            with self._get_client() as client:
                response = client.get(f"/files/{file_id}/link/")
                body = _handle_response(response)
        except httpx.RequestError as e:
            logger.error("Blob storage unavailable: %s", e)
            raise BlobStorageUnavailable(str(e)) from e

        return body["url"]
