"""
Supabase Storage client for candidate files.

Uses the Storage REST API directly with the service role key.
"""
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from stars.config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY
from stars.exceptions import StorageError

logger = logging.getLogger(__name__)


class SupabaseStorageClient:
    """Upload, sign, delete and fetch objects in Supabase Storage."""

    def __init__(
        self,
        supabase_url: str = SUPABASE_URL,
        service_role_key: str = SUPABASE_SERVICE_ROLE_KEY,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = f"{supabase_url.rstrip('/')}/storage/v1"
        self.service_role_key = service_role_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self.service_role_key:
            raise StorageError("SUPABASE_SERVICE_ROLE_KEY not configured")
        return {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    @staticmethod
    def _object_path(bucket: str, path: str) -> str:
        return f"{quote(bucket)}/{quote(path.lstrip('/'))}"

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/object/public/{self._object_path(bucket, path)}"

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """
        Upload (or overwrite) an object.

        Returns:
            The object's public URL
        """
        headers = {**self._headers(), "Content-Type": content_type, "x-upsert": "true"}
        url = f"{self.base_url}/object/{self._object_path(bucket, path)}"

        try:
            async with self._client() as client:
                response = await client.post(url, content=data, headers=headers)
        except httpx.HTTPError as e:
            raise StorageError(f"Upload failed: {e}")

        if not response.is_success:
            logger.error(f"Storage upload failed ({response.status_code}): {response.text[:500]}")
            raise StorageError(f"Upload failed with status {response.status_code}")

        logger.info(f"Uploaded {len(data)} bytes to {bucket}/{path}")
        return self.public_url(bucket, path)

    async def get_signed_url(self, bucket: str, path: str, expires_in: int = 3600) -> str:
        url = f"{self.base_url}/object/sign/{self._object_path(bucket, path)}"

        try:
            async with self._client() as client:
                response = await client.post(url, json={"expiresIn": expires_in}, headers=self._headers())
        except httpx.HTTPError as e:
            raise StorageError(f"Signing failed: {e}")

        if not response.is_success:
            raise StorageError(f"Signing failed with status {response.status_code}")

        signed = response.json().get("signedURL") or response.json().get("signedUrl")
        if not signed:
            raise StorageError("Storage returned no signed URL")
        return f"{self.base_url}{signed}" if signed.startswith("/") else signed

    async def delete(self, bucket: str, path: str) -> None:
        url = f"{self.base_url}/object/{quote(bucket)}"

        try:
            async with self._client() as client:
                response = await client.request(
                    "DELETE", url, json={"prefixes": [path]}, headers=self._headers()
                )
        except httpx.HTTPError as e:
            raise StorageError(f"Delete failed: {e}")

        if not response.is_success:
            raise StorageError(f"Delete failed with status {response.status_code}")

    async def download(self, url: str, max_bytes: int) -> tuple[bytes, Optional[str]]:
        """
        Fetch a file from any URL, refusing anything larger than ``max_bytes``.

        The limit is checked against Content-Length and again while streaming.

        Returns:
            (content, content type)
        """
        try:
            async with self._client() as client:
                async with client.stream("GET", url, follow_redirects=True) as response:
                    if not response.is_success:
                        raise StorageError(f"Download failed with status {response.status_code}")

                    declared = response.headers.get("content-length")
                    if declared and declared.isdigit() and int(declared) > max_bytes:
                        raise StorageError(f"File exceeds {max_bytes // (1024 * 1024)}MB limit")

                    chunks = []
                    received = 0
                    async for chunk in response.aiter_bytes():
                        received += len(chunk)
                        if received > max_bytes:
                            raise StorageError(f"File exceeds {max_bytes // (1024 * 1024)}MB limit")
                        chunks.append(chunk)

                    content_type = response.headers.get("content-type")
        except httpx.HTTPError as e:
            raise StorageError(f"Download failed: {e}")

        return b"".join(chunks), content_type
