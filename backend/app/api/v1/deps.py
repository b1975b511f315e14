"""
Shared route dependencies.

Services are built once in the application lifespan and stored on
`app.state`; routes get them through these functions.
"""

from fastapi import Header, HTTPException, Request

from app.config import settings
from app.features.concept2 import Concept2OAuth, TokenManager
from app.features.sync import BatchSyncScheduler
from app.features.webhooks import WebhookIngestor
from app.shared.campaign import CampaignWindow
from app.shared.telegram import TelegramNotifier


# =============================================================================
# API Key Dependency
# =============================================================================

async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """Verify the admin API key shared with the bot."""
    if not settings.admin_api_key:
        raise HTTPException(status_code=503, detail="Admin API not configured")
    if x_api_key != settings.admin_api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return x_api_key


# =============================================================================
# Services
# =============================================================================

def get_window(request: Request) -> CampaignWindow:
    return request.app.state.window


def get_oauth(request: Request) -> Concept2OAuth:
    return request.app.state.oauth


def get_tokens(request: Request) -> TokenManager:
    return request.app.state.tokens


def get_scheduler(request: Request) -> BatchSyncScheduler:
    return request.app.state.scheduler


def get_ingestor(request: Request) -> WebhookIngestor:
    return request.app.state.ingestor


def get_notifier(request: Request) -> TelegramNotifier | None:
    return getattr(request.app.state, "notifier", None)
