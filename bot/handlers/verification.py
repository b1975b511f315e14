"""
Photo Verification Handlers

A photo of a PM5 monitor verifies the matching logged workout.
"""

import io
import logging

from aiogram import Bot, F, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message

from bot.config import settings
from bot.services.api_client import api_client, APIError, TRANSPORT_ERRORS
from bot.services.meter_reader import MeterReadingError, PhotoMeterReader
from bot.utils.formatters import format_meters

logger = logging.getLogger(__name__)

router = Router()

ERROR_REPLY = "An error occurred while verifying. Please try again later."

_reader: PhotoMeterReader | None = None


def get_reader() -> PhotoMeterReader:
    global _reader
    if _reader is None:
        _reader = PhotoMeterReader(settings.openai_api_key, model=settings.verification_model)
    return _reader


@router.message(F.photo)
async def handle_photo(message: Message, bot: Bot):
    """Read the monitor, then verify the matching workout."""
    if not settings.photo_verification_enabled:
        return

    telegram_id = str(message.from_user.id)
    account = await api_client.users.get_info(telegram_id)
    if not account or not account.get("connected"):
        await message.answer(
            "Please connect your Concept2 account first using /row_setup "
            "before submitting verifications."
        )
        return

    photo = message.photo[-1]
    if photo.file_size and photo.file_size > settings.max_file_size_mb * 1024 * 1024:
        await message.answer(f"❌ Photo is too large (max {settings.max_file_size_mb} MB).")
        return

    try:
        buffer = io.BytesIO()
        await bot.download(photo, destination=buffer)
        reading = await get_reader().read(buffer.getvalue(), "image/jpeg")
    except MeterReadingError as e:
        logger.warning(f"Could not read photo from {telegram_id}: {e}")
        await message.answer("Failed to verify image: could not read the monitor.")
        return
    except (TelegramAPIError, *TRANSPORT_ERRORS) as e:
        logger.error(f"Could not download photo from {telegram_id}: {e!r}")
        await message.answer(ERROR_REPLY)
        return

    if not reading.usable:
        await message.answer(
            "Failed to verify image: this does not look like a Concept2 PM5."
        )
        return

    try:
        await api_client.campaign.verify_meters(telegram_id, reading.meters)
    except APIError as e:
        if e.status == 404:
            await message.answer(
                f"Failed to verify image: no unverified workout of "
                f"{format_meters(reading.meters)} found. Make sure it is logged first."
            )
        else:
            logger.error(f"Verification failed for {telegram_id}: {e}")
            await message.answer(ERROR_REPLY)
        return
    except TRANSPORT_ERRORS as e:
        logger.error(f"Verification request failed for {telegram_id}: {e!r}")
        await message.answer(ERROR_REPLY)
        return

    await message.answer(f"✅ Verified your workout of {format_meters(reading.meters)}.")
