"""
Telegram Webhook Endpoint

In webhook mode Telegram posts chat updates here and they are handed to
the aiogram dispatcher built in the lifespan. When a secret is set,
Telegram echoes it in X-Telegram-Bot-Api-Secret-Token on every call.
"""

import logging
import secrets

from aiogram.types import Update
from fastapi import APIRouter, Header, Request, Response

from app.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/telegram/webhook")
async def telegram_webhook(
    request: Request,
    secret_token: str | None = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
) -> Response:
    """Feed one chat update to the dispatcher. Always 200 once accepted."""
    bot = getattr(request.app.state, "bot", None)
    bot_dp = getattr(request.app.state, "bot_dp", None)

    if not bot or not bot_dp:
        logger.warning("Telegram update received but the bot is not running")
        return Response(status_code=503)

    expected = settings.telegram_webhook_secret
    if expected and not secrets.compare_digest(secret_token or "", expected):
        logger.warning("Telegram update rejected: bad secret token")
        return Response(status_code=401)

    try:
        update = Update.model_validate(await request.json(), context={"bot": bot})
        await bot_dp.feed_update(bot=bot, update=update)
    except Exception:
        # Non-200 makes Telegram redeliver the same update
        logger.exception("Failed to process Telegram update")

    return Response(status_code=200)
