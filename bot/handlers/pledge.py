"""
Pledge Handlers

Commands:
- /pledge <meters> - Set the campaign pledge
"""

import logging

from aiogram import Router
from aiogram.types import Message
from aiogram.filters import Command, CommandObject

from bot.services.api_client import api_client, APIError, TRANSPORT_ERRORS
from bot.utils.formatters import format_meters

logger = logging.getLogger(__name__)

router = Router()


def parse_meters(text: str | None) -> int | None:
    """Parse a pledge argument like '50000' or '50,000'. None if invalid."""
    if not text:
        return None
    cleaned = text.strip().split()[0].replace(",", "").replace("_", "")
    if not cleaned.isdigit():
        return None
    return int(cleaned)


@router.message(Command("pledge"))
async def cmd_pledge(message: Message, command: CommandObject):
    """Store the caller's pledge."""
    if not command.args:
        await message.answer("Usage: /pledge &lt;meters&gt;", parse_mode="HTML")
        return

    meters = parse_meters(command.args)
    if meters is None:
        await message.answer("Please provide a valid number of meters.")
        return

    user = message.from_user
    try:
        await api_client.users.set_pledge(
            str(user.id), meters, user.username, user.full_name
        )
    except (APIError, *TRANSPORT_ERRORS) as e:
        logger.error(f"Pledge failed for {user.id}: {e!r}")
        await message.answer("😕 Could not save your pledge. Try again later.")
        return

    await message.answer(f"Pledge of {format_meters(meters)} recorded!")
