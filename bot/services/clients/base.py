"""Base API client with common HTTP logic."""
import asyncio
import logging
from typing import Any, Optional

import aiohttp

logger = logging.getLogger(__name__)


# Backend unreachable or too slow; handlers answer these like APIError
TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class APIError(Exception):
    """API error."""

    def __init__(self, status: int, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(f"API error {status}: {detail}")


class BaseAPIClient:
    """Base class for API clients."""

    def __init__(self, base_url: str, timeout: float = 30.0, api_key: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key = api_key
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    def _admin_headers(self) -> dict[str, str]:
        return {"X-API-Key": self.api_key} if self.api_key else {}

    @staticmethod
    async def _read(resp: aiohttp.ClientResponse) -> dict[str, Any]:
        try:
            data = await resp.json()
        except (aiohttp.ContentTypeError, ValueError):
            data = {"detail": (await resp.text())[:200] or resp.reason}
        if resp.status != 200:
            detail = data.get("detail", "Unknown error") if isinstance(data, dict) else str(data)
            raise APIError(resp.status, detail)
        return data

    async def _get(self, path: str, **kwargs) -> dict[str, Any]:
        """Make GET request."""
        session = await self._get_session()
        url = f"{self.base_url}{path}"

        async with session.get(url, **kwargs) as resp:
            return await self._read(resp)

    async def _get_optional(self, path: str, **kwargs) -> Optional[dict[str, Any]]:
        """Make GET request, return None on error."""
        try:
            return await self._get(path, **kwargs)
        except APIError:
            return None
        except TRANSPORT_ERRORS as e:
            logger.error(f"Request to {path} failed: {e!r}")
            return None

    async def _post(self, path: str, **kwargs) -> dict[str, Any]:
        """Make POST request."""
        session = await self._get_session()
        url = f"{self.base_url}{path}"

        async with session.post(url, **kwargs) as resp:
            return await self._read(resp)

    async def _put(self, path: str, **kwargs) -> dict[str, Any]:
        """Make PUT request."""
        session = await self._get_session()
        url = f"{self.base_url}{path}"

        async with session.put(url, **kwargs) as resp:
            return await self._read(resp)

    async def close(self):
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
