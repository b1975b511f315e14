"""Campaign API client: leaderboard, sync and verification."""
import logging
from typing import Optional

import aiohttp

from .base import BaseAPIClient

logger = logging.getLogger(__name__)


class CampaignClient(BaseAPIClient):
    """Client for campaign endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        api_key: Optional[str] = None,
        sync_timeout: float = 600.0,
    ):
        super().__init__(base_url, timeout=timeout, api_key=api_key)
        self.sync_timeout = sync_timeout

    async def get_leaderboard(self) -> dict:
        return await self._get("/api/v1/leaderboard")

    async def get_config(self) -> dict:
        return await self._get("/api/v1/config")

    async def trigger_sync(self) -> int:
        """
        Run a batch sync on the backend (admin).

        The backend answers only after every account is synced, so this
        call gets `sync_timeout` instead of the client default.

        Returns:
            Number of accounts processed
        """
        data = await self._post(
            "/api/v1/admin/sync",
            headers=self._admin_headers(),
            timeout=aiohttp.ClientTimeout(total=self.sync_timeout),
        )
        return int(data.get("processed", 0))

    async def verify_meters(self, telegram_id: str, meters: int) -> dict:
        """
        Verify the user's workout matching a photographed meter reading.

        Raises:
            APIError: 404 if there is no account or no matching workout
        """
        return await self._post(
            f"/api/v1/verification/{telegram_id}",
            json={"meters": meters},
        )
