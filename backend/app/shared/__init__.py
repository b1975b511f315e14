"""
Shared utilities (NOT business logic).

Usage:
    from app.shared import CampaignWindow, BaseRepository
    from app.shared.formatters import format_meters
"""
from .campaign import CampaignWindow
from .formatters import (
    format_meters,
    format_day,
    format_progress,
)
from .repository import BaseRepository
from .telegram import TelegramNotifier
