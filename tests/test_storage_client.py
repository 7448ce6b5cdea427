"""
Tests for the Supabase Storage client.
"""
import httpx
import pytest

from stars.exceptions import StorageError
from stars.services import SupabaseStorageClient


def storage(handler, key="service-key") -> SupabaseStorageClient:
    return SupabaseStorageClient(
        supabase_url="https://project.supabase.test",
        service_role_key=key,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_upload_returns_public_url():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["upsert"] = request.headers["x-upsert"]
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.content
        return httpx.Response(200, json={"Key": "candidate-files/candidates/1/cv.pdf"})

    url = await storage(handler).upload("candidate-files", "candidates/1/cv.pdf", b"pdf", "application/pdf")

    assert seen == {
        "method": "POST",
        "path": "/storage/v1/object/candidate-files/candidates/1/cv.pdf",
        "upsert": "true",
        "auth": "Bearer service-key",
        "body": b"pdf",
    }
    assert url == "https://project.supabase.test/storage/v1/object/public/candidate-files/candidates/1/cv.pdf"


@pytest.mark.asyncio
async def test_upload_failure():
    def handler(request):
        return httpx.Response(403, json={"error": "forbidden"})

    with pytest.raises(StorageError) as exc_info:
        await storage(handler).upload("candidate-files", "a.pdf", b"x", "application/pdf")

    assert exc_info.value.message == "Upload failed with status 403"


@pytest.mark.asyncio
async def test_missing_key():
    def handler(request):
        raise AssertionError("no request should be made without a key")

    with pytest.raises(StorageError):
        await storage(handler, key="").upload("candidate-files", "a.pdf", b"x", "application/pdf")


@pytest.mark.asyncio
async def test_signed_url_is_absolute():
    def handler(request):
        return httpx.Response(200, json={"signedURL": "/object/sign/candidate-files/a.pdf?token=abc"})

    url = await storage(handler).get_signed_url("candidate-files", "a.pdf", expires_in=60)

    assert url == "https://project.supabase.test/storage/v1/object/sign/candidate-files/a.pdf?token=abc"


@pytest.mark.asyncio
async def test_download():
    def handler(request):
        return httpx.Response(200, content=b"resume bytes", headers={"content-type": "application/pdf"})

    content, content_type = await storage(handler).download("https://files.test/cv.pdf", max_bytes=1024)

    assert content == b"resume bytes"
    assert content_type == "application/pdf"


@pytest.mark.asyncio
async def test_download_over_limit():
    def handler(request):
        return httpx.Response(200, content=b"x" * 4096)

    with pytest.raises(StorageError) as exc_info:
        await storage(handler).download("https://files.test/cv.pdf", max_bytes=1024)

    assert exc_info.value.message.endswith("MB limit")


@pytest.mark.asyncio
async def test_download_http_error():
    def handler(request):
        return httpx.Response(404)

    with pytest.raises(StorageError) as exc_info:
        await storage(handler).download("https://files.test/missing.pdf", max_bytes=1024)

    assert exc_info.value.message == "Download failed with status 404"


@pytest.mark.asyncio
async def test_download_connection_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(StorageError) as exc_info:
        await storage(handler).download("https://files.test/cv.pdf", max_bytes=1024)

    assert exc_info.value.message.startswith("Download failed:")
