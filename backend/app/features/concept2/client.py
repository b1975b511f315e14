"""
Concept2 Logbook API client.

Provides methods for interacting with the Logbook REST API.
Handles authentication errors, timeouts and pagination.

Error mapping:
- 401 -> Concept2AuthError (caller refreshes the token and retries once)
- timeout, network error, 5xx, any other non-200, bad JSON -> Concept2APIError
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from app.shared.campaign import CampaignWindow

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class Concept2Error(Exception):
    """Base Concept2 error."""
    pass


class Concept2APIError(Concept2Error):
    """Transient or protocol error; the request may succeed next cycle."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class Concept2AuthError(Concept2Error):
    """Access token rejected (expired or revoked)."""
    pass


# =============================================================================
# Concept2 Client
# =============================================================================

class Concept2Client:
    """
    Async client for the Concept2 Logbook API.

    Usage:
        client = Concept2Client(timeout=15.0)
        me = await client.get_me(access_token)
        results = await client.get_results(access_token, window, "rower")
    """

    RESULTS_PER_PAGE = 250
    MAX_PAGES = 20

    def __init__(
        self,
        base_url: str = "https://log.concept2.com",
        timeout: float = 15.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/api"

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                yield client

    async def _api_request(
        self,
        endpoint: str,
        access_token: str,
        params: Optional[dict] = None
    ) -> dict:
        """
        Make an authenticated GET request.

        Raises:
            Concept2AuthError: If authentication fails
            Concept2APIError: On timeout, network failure or error status
        """
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.api_url}{endpoint}",
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/vnd.c2logbook.v1+json",
                    },
                    params=params,
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            raise Concept2APIError(f"Timeout calling {endpoint}") from e
        except httpx.HTTPError as e:
            raise Concept2APIError(f"Network error calling {endpoint}: {e}") from e

        if response.status_code == 401:
            raise Concept2AuthError("Invalid or expired token")
        elif response.status_code != 200:
            raise Concept2APIError(
                f"API error: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise Concept2APIError(f"Invalid JSON from {endpoint}") from e

    async def get_me(self, access_token: str) -> dict:
        """
        Get the authenticated Logbook user.

        The Logbook wraps payloads in {"data": ...}; older responses are bare.
        """
        payload = await self._api_request("/users/me", access_token)
        if isinstance(payload.get("data"), dict):
            return payload["data"]
        return payload

    async def get_user_id(self, access_token: str) -> str:
        """Concept2 user ID of the token's owner."""
        me = await self.get_me(access_token)
        user_id = me.get("id")
        if user_id is None:
            raise Concept2APIError("User payload has no id")
        return str(user_id)

    async def get_results(
        self,
        access_token: str,
        window: CampaignWindow,
        activity_type: Optional[str] = "rower",
    ) -> list[dict]:
        """
        Get the user's results inside the window.

        Args:
            access_token: Valid access token
            window: Inclusive date range
            activity_type: Machine type filter (rower, skierg, bike); None for all

        Returns:
            Raw result dicts, all pages concatenated
        """
        params = {
            "from": window.start.isoformat(),
            "to": window.end.isoformat(),
            "number": self.RESULTS_PER_PAGE,
        }
        if activity_type:
            params["type"] = activity_type

        results: list[dict] = []
        page = 1
        while True:
            payload = await self._api_request(
                "/users/me/results",
                access_token,
                params={**params, "page": page},
            )
            data = payload.get("data") or []
            if not isinstance(data, list):
                raise Concept2APIError("Results payload is not a list")
            results.extend(data)

            pagination = (payload.get("meta") or {}).get("pagination") or {}
            total_pages = pagination.get("total_pages") or 1
            if page >= total_pages:
                break
            if page >= self.MAX_PAGES:
                logger.warning(
                    f"Stopped paging results after {self.MAX_PAGES} pages "
                    f"({total_pages} available)"
                )
                break
            page += 1

        return results
