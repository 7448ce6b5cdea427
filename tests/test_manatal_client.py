"""
Tests for the Manatal client: request shape and HTTP error mapping.
"""
import httpx
import pytest

from stars.exceptions import (
    ATSCredentialError,
    ATSNotFoundError,
    ATSProviderError,
    ATSRateLimitedError,
    ATSTimeoutError,
)
from stars.services import ManatalClient

BASE_URL = "https://manatal.test/open/v3"


def manatal(handler, api_key="mk_test") -> ManatalClient:
    return ManatalClient(api_key=api_key, base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestRequests:

    @pytest.mark.asyncio
    async def test_get_candidate_uses_token_auth(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={"id": 42, "full_name": "Jane Doe", "email": "jane@example.com"})

        candidate = await manatal(handler).get_candidate(42)

        assert candidate.id == 42
        assert candidate.full_name == "Jane Doe"
        assert seen["path"] == "/open/v3/candidates/42/"
        assert seen["auth"] == "Token mk_test"

    @pytest.mark.asyncio
    async def test_search_sends_name_filter(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={
                "count": 1,
                "next": None,
                "previous": None,
                "results": [{"id": 7, "full_name": "Jane Smith"}],
            })

        response = await manatal(handler).search_candidates("jane", page=2, page_size=5)

        assert seen["params"] == {
            "full_name": "jane",
            "case_insensitive": "true",
            "page": "2",
            "page_size": "5",
        }
        assert response.count == 1
        assert response.results[0].full_name == "Jane Smith"

    @pytest.mark.asyncio
    async def test_history_accepts_page_or_list(self):
        def handler(request):
            if request.url.path.endswith("/educations/"):
                return httpx.Response(200, json={"results": [{"school": "MIT", "degree": "BSc"}]})
            return httpx.Response(200, json=[{"company": "Acme", "title": "Engineer", "is_current": True}])

        client = manatal(handler)

        educations = await client.list_educations(42)
        experiences = await client.list_experiences(42)

        assert [e.school for e in educations] == ["MIT"]
        assert experiences[0].is_current is True

    @pytest.mark.asyncio
    async def test_open_jobs(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"results": [{"id": 1, "position_name": "Backend Engineer"}]})

        jobs = await manatal(handler).list_open_jobs()

        assert seen["params"]["status"] == "active"
        assert jobs[0].position_name == "Backend Engineer"

    def test_candidate_url(self):
        assert ManatalClient.candidate_url(42).endswith("/candidates/42")


class TestErrorMapping:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code, error_type, kind", [
        (401, ATSCredentialError, "ats_invalid_credential"),
        (404, ATSNotFoundError, "ats_not_found"),
        (429, ATSRateLimitedError, "ats_rate_limited"),
        (500, ATSProviderError, "ats_provider"),
        (503, ATSProviderError, "ats_provider"),
    ])
    async def test_status_codes(self, status_code, error_type, kind):
        def handler(request):
            return httpx.Response(status_code, json={"detail": "nope"})

        with pytest.raises(error_type) as exc_info:
            await manatal(handler).get_candidate(1)

        assert exc_info.value.kind == kind

    @pytest.mark.asyncio
    async def test_provider_error_message_carries_status(self):
        def handler(request):
            return httpx.Response(502, text="bad gateway")

        with pytest.raises(ATSProviderError) as exc_info:
            await manatal(handler).get_candidate(1)

        assert exc_info.value.message == "Manatal API error: 502"

    @pytest.mark.asyncio
    async def test_invalid_key_message(self):
        def handler(request):
            return httpx.Response(401)

        with pytest.raises(ATSCredentialError) as exc_info:
            await manatal(handler).get_candidate(1)

        assert exc_info.value.message == "Invalid Manatal API key"

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ATSTimeoutError) as exc_info:
            await manatal(handler).get_candidate(1)

        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("no route to host", request=request)

        with pytest.raises(ATSProviderError) as exc_info:
            await manatal(handler).get_candidate(1)

        assert exc_info.value.message == "Could not connect to Manatal"

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        def handler(request):
            raise AssertionError("no request should be made without a key")

        with pytest.raises(ATSCredentialError) as exc_info:
            await manatal(handler, api_key="").get_candidate(1)

        assert "MANATAL_API_KEY" in exc_info.value.message
