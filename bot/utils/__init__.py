"""Bot utilities."""
from .formatters import format_meters, format_progress, format_leaderboard

__all__ = [
    "format_meters",
    "format_progress",
    "format_leaderboard",
]
