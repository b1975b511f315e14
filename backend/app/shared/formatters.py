"""
Formatting utilities for display.

Used by both backend and bot.
"""

from datetime import date, datetime


def format_meters(meters: int | None) -> str:
    """
    Format a meter count with thousands separators.

    Args:
        meters: Distance in meters

    Returns:
        Formatted string (e.g., '12,500 m')
    """
    if meters is None:
        return "—"
    return f"{meters:,} m"


def format_day(value: date | datetime) -> str:
    """Calendar day key used in daily breakdowns (YYYY-MM-DD)."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def format_progress(total_meters: int, pledge_meters: int) -> str:
    """
    Format progress toward a pledge.

    Args:
        total_meters: Verified meters rowed so far
        pledge_meters: Pledged meters (0 means no pledge)

    Returns:
        Formatted string (e.g., '5,000 m of 50,000 m (10%)')
    """
    if not pledge_meters:
        return format_meters(total_meters)
    percent = int(total_meters * 100 / pledge_meters)
    return f"{format_meters(total_meters)} of {format_meters(pledge_meters)} ({percent}%)"
