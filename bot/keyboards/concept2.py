"""Keyboards for Concept2 integration."""
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton


def get_concept2_connect_keyboard(auth_url: str) -> InlineKeyboardMarkup:
    """Keyboard with Concept2 connect button."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(
            text="🔗 Connect Concept2",
            url=auth_url
        )]
    ])
