"""API clients for backend communication."""
from typing import Optional

from .base import BaseAPIClient, APIError, TRANSPORT_ERRORS
from .campaign import CampaignClient
from .concept2 import Concept2Client
from .health import HealthClient
from .users import UsersClient


class APIClient:
    """Unified API client with all sub-clients."""

    def __init__(
        self,
        base_url: str,
        admin_api_key: Optional[str] = None,
        sync_timeout: float = 600.0,
    ):
        self.base_url = base_url
        self.users = UsersClient(base_url)
        self.concept2 = Concept2Client(base_url)
        self.campaign = CampaignClient(
            base_url, api_key=admin_api_key, sync_timeout=sync_timeout
        )
        self.health = HealthClient(base_url)

    async def close(self):
        """Close all client sessions."""
        await self.users.close()
        await self.concept2.close()
        await self.campaign.close()
        await self.health.close()

    async def health_check(self) -> bool:
        return await self.health.check()


__all__ = [
    "APIClient",
    "APIError",
    "TRANSPORT_ERRORS",
    "BaseAPIClient",
    "CampaignClient",
    "Concept2Client",
    "HealthClient",
    "UsersClient",
]
