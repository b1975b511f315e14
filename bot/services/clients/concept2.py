"""Concept2 integration API client."""
from typing import Optional
from urllib.parse import urlencode

from .base import BaseAPIClient


class Concept2Client(BaseAPIClient):
    """Client for Concept2 connect endpoints."""

    def get_auth_url(
        self,
        telegram_id: str,
        username: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> str:
        """
        Get URL for Concept2 OAuth authorization.

        User should open this URL to connect their Logbook.
        """
        params = {"telegram_id": telegram_id}
        if username:
            params["username"] = username
        if display_name:
            params["display_name"] = display_name
        return f"{self.base_url}/api/v1/auth/concept2?{urlencode(params)}"
