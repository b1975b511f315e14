"""Bot handlers."""

from bot.handlers import admin, common, concept2, pledge, verification

__all__ = ["admin", "common", "concept2", "pledge", "verification"]
