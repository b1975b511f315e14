"""
Common Handlers

Basic commands: /start, /help, /leaderboard
"""

import logging
from aiogram import Router
from aiogram.types import Message
from aiogram.filters import Command

from bot.services.api_client import api_client, APIError, TRANSPORT_ERRORS
from bot.utils.formatters import format_leaderboard

logger = logging.getLogger(__name__)

router = Router()


HELP_TEXT = """
🚣 <b>Rowing pledge campaign</b>

Log your rows on the Concept2 Logbook and they count toward the club total.

<b>Commands:</b>
/row_setup — connect your Concept2 Logbook
/pledge &lt;meters&gt; — set your pledge
/leaderboard — current standings
/help — this help

Only verified rows count. To verify one, send a photo of the PM5 monitor
showing the finished workout.
"""


@router.message(Command("start"))
async def cmd_start(message: Message):
    """Handle /start command - register the user."""
    user = message.from_user
    try:
        await api_client.users.register(
            str(user.id), user.username, user.full_name
        )
    except (APIError, *TRANSPORT_ERRORS) as e:
        logger.error(f"Register failed for {user.id}: {e!r}")

    await message.answer(HELP_TEXT, parse_mode="HTML")


@router.message(Command("help"))
async def cmd_help(message: Message):
    """Handle /help command."""
    await message.answer(HELP_TEXT, parse_mode="HTML")


@router.message(Command("leaderboard"))
async def cmd_leaderboard(message: Message):
    """Show the current standings."""
    try:
        board = await api_client.campaign.get_leaderboard()
    except (APIError, *TRANSPORT_ERRORS) as e:
        logger.error(f"Leaderboard fetch failed: {e!r}")
        await message.answer("😕 Could not load the leaderboard. Try again later.")
        return

    await message.answer(format_leaderboard(board), parse_mode="HTML")
