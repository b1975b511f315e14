"""Users API client."""
import logging
from typing import Optional

from .base import BaseAPIClient

logger = logging.getLogger(__name__)


class UsersClient(BaseAPIClient):
    """Client for user endpoints."""

    async def get_info(self, telegram_id: str) -> Optional[dict]:
        """
        Get account info.

        Returns:
            Dict with account info or None if user doesn't exist
        """
        return await self._get_optional(f"/api/v1/users/{telegram_id}")

    async def register(
        self,
        telegram_id: str,
        username: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> dict:
        """Create the account or refresh its chat names."""
        return await self._put(
            f"/api/v1/users/{telegram_id}",
            json={"username": username, "display_name": display_name},
        )

    async def set_pledge(
        self,
        telegram_id: str,
        meters: int,
        username: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> dict:
        """
        Store the campaign pledge.

        Raises:
            APIError: If the backend rejects the pledge
        """
        return await self._post(
            f"/api/v1/users/{telegram_id}/pledge",
            json={"meters": meters, "username": username, "display_name": display_name},
        )
