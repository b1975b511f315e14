"""Backend liveness probe."""
from typing import Optional

from .base import BaseAPIClient


class HealthClient(BaseAPIClient):
    """GET /health; used once at bot startup."""

    async def status(self) -> Optional[dict]:
        """Health payload ({status, version}), or None if unreachable."""
        return await self._get_optional("/health")

    async def check(self) -> bool:
        data = await self.status()
        return bool(data) and data.get("status") == "healthy"
