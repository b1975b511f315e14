"""
Backend API Client

Shared instance used by all handlers.
"""

from bot.config import settings
from bot.services.clients import APIClient, APIError, TRANSPORT_ERRORS

api_client = APIClient(
    settings.backend_url,
    admin_api_key=settings.admin_api_key,
    sync_timeout=settings.sync_timeout_seconds,
)

__all__ = ["api_client", "APIClient", "APIError", "TRANSPORT_ERRORS"]
