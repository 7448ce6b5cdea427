"""
Manatal ATS client.

Thin async wrapper over the Manatal Open API v3. HTTP failures are mapped to
typed ATS exceptions so callers never inspect status codes or messages.
"""
import logging
from typing import Any, Optional

import httpx

from stars.config import (
    MANATAL_API_KEY,
    MANATAL_APP_URL,
    MANATAL_BASE_URL,
    MANATAL_TIMEOUT_SECONDS,
)
from stars.exceptions import (
    ATSCredentialError,
    ATSNotFoundError,
    ATSProviderError,
    ATSRateLimitedError,
    ATSTimeoutError,
)
from stars.models import (
    ManatalCandidate,
    ManatalEducation,
    ManatalExperience,
    ManatalJob,
    ManatalSearchResponse,
)

logger = logging.getLogger(__name__)


class ManatalClient:
    """Client for the Manatal candidate and job endpoints."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = MANATAL_BASE_URL,
        timeout: float = MANATAL_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = MANATAL_API_KEY if api_key is None else api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def candidate_url(manatal_id: int) -> str:
        """Link to the candidate in the Manatal web app."""
        return f"{MANATAL_APP_URL}/candidates/{manatal_id}"

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ATSCredentialError("MANATAL_API_KEY environment variable is not configured")
        return {
            "Authorization": f"Token {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        headers = self._headers()

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(path, params=params, headers=headers)
        except httpx.TimeoutException:
            logger.warning(f"Manatal request timed out: GET {path}")
            raise ATSTimeoutError()
        except httpx.TransportError as e:
            logger.error(f"Could not connect to Manatal (GET {path}): {e}")
            raise ATSProviderError("Could not connect to Manatal")

        if response.status_code == 401:
            raise ATSCredentialError("Invalid Manatal API key")
        if response.status_code == 404:
            raise ATSNotFoundError()
        if response.status_code == 429:
            raise ATSRateLimitedError()
        if not response.is_success:
            logger.error(f"Manatal API error {response.status_code} for GET {path}: {response.text[:500]}")
            raise ATSProviderError(
                f"Manatal API error: {response.status_code}",
                details={"status_code": response.status_code},
            )

        return response.json()

    @staticmethod
    def _results(data: Any) -> list:
        """List endpoints answer either a page ({"results": [...]}) or a bare list."""
        if isinstance(data, dict):
            return data.get("results") or []
        return data or []

    # =========================================================================
    # Candidates
    # =========================================================================

    async def get_candidate(self, manatal_id: int) -> ManatalCandidate:
        data = await self._get(f"/candidates/{manatal_id}/")
        return ManatalCandidate.model_validate(data)

    async def list_educations(self, manatal_id: int) -> list[ManatalEducation]:
        data = await self._get(f"/candidates/{manatal_id}/educations/")
        return [ManatalEducation.model_validate(item) for item in self._results(data)]

    async def list_experiences(self, manatal_id: int) -> list[ManatalExperience]:
        data = await self._get(f"/candidates/{manatal_id}/experiences/")
        return [ManatalExperience.model_validate(item) for item in self._results(data)]

    async def search_candidates(
        self,
        query: str,
        page: int = 1,
        page_size: int = 10,
    ) -> ManatalSearchResponse:
        """Case-insensitive search on full name."""
        data = await self._get(
            "/candidates/",
            params={
                "full_name": query,
                "case_insensitive": "true",
                "page": page,
                "page_size": page_size,
            },
        )
        if isinstance(data, list):
            return ManatalSearchResponse(
                results=[ManatalCandidate.model_validate(item) for item in data],
                count=len(data),
            )
        return ManatalSearchResponse.model_validate(data)

    # =========================================================================
    # Jobs
    # =========================================================================

    async def list_open_jobs(self, page: int = 1, page_size: int = 50) -> list[ManatalJob]:
        data = await self._get(
            "/jobs/",
            params={"status": "active", "page": page, "page_size": page_size},
        )
        return [ManatalJob.model_validate(item) for item in self._results(data)]
