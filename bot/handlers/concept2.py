"""
Concept2 Integration Handlers

Commands:
- /row_setup - Show the Concept2 connect button
"""

from aiogram import Router
from aiogram.types import Message
from aiogram.filters import Command

from bot.services.api_client import api_client
from bot.keyboards.concept2 import get_concept2_connect_keyboard

router = Router()


@router.message(Command("row_setup"))
async def cmd_row_setup(message: Message):
    """Send the OAuth link for the caller's Telegram account."""
    user = message.from_user
    auth_url = api_client.concept2.get_auth_url(
        str(user.id), user.username, user.full_name
    )

    # Telegram refuses URL buttons pointing at localhost
    if "localhost" in auth_url or "127.0.0.1" in auth_url:
        await message.answer(
            "🚣 <b>Connect Concept2</b>\n\n"
            "Open this link to authorize the Logbook:\n"
            f"<code>{auth_url}</code>\n\n"
            "<i>Please do not share this link with others.</i>",
            parse_mode="HTML",
        )
        return

    await message.answer(
        "🚣 <b>Connect Concept2</b>\n\n"
        "Click below to connect your Concept2 Logbook.\n"
        "<i>Please do not share this link with others.</i>",
        parse_mode="HTML",
        reply_markup=get_concept2_connect_keyboard(auth_url),
    )
