"""
Admin Handlers

Commands:
- /sync_meters - Run a batch sync now (admins only)
"""

import logging

from aiogram import Router
from aiogram.types import Message
from aiogram.filters import Command

from bot.config import settings
from bot.services.api_client import api_client, APIError, TRANSPORT_ERRORS

logger = logging.getLogger(__name__)

router = Router()


@router.message(Command("sync_meters"))
async def cmd_sync_meters(message: Message):
    """Trigger a sync of all connected accounts."""
    if str(message.from_user.id) not in settings.admin_ids:
        logger.info(f"Ignoring /sync_meters from non-admin {message.from_user.id}")
        return

    await message.answer("Starting sync process...")
    try:
        processed = await api_client.campaign.trigger_sync()
    except APIError as e:
        logger.error(f"Admin sync failed: {e}")
        await message.answer(f"Sync failed: {e.detail}")
        return
    except TRANSPORT_ERRORS as e:
        logger.error(f"Admin sync did not complete: {e!r}")
        await message.answer("Sync failed: the backend did not respond in time.")
        return

    await message.answer(f"Sync complete. Processed {processed} users.")
