"""
Bot formatters.

Meter formatting comes from backend/app/shared/formatters.py; this module
adds the chat rendering of the leaderboard.
"""

from html import escape

from app.shared.formatters import format_meters, format_progress

__all__ = ["format_meters", "format_progress", "format_leaderboard"]

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def format_leaderboard(board: dict, limit: int = 10) -> str:
    """
    Render the leaderboard JSON as an HTML chat message.

    Args:
        board: /api/v1/leaderboard response
        limit: Number of entries to show

    Returns:
        Message text
    """
    lines = [f"🚣 <b>Leaderboard</b> ({board['start']} – {board['end']})", ""]

    entries = board.get("entries") or []
    if not entries:
        lines.append("Nobody has signed up yet.")
    for rank, entry in enumerate(entries[:limit], start=1):
        marker = MEDALS.get(rank, f"{rank}.")
        progress = format_progress(entry["total_meters"], entry["pledge_meters"])
        lines.append(f"{marker} {escape(entry['name'])}: {progress}")

    lines.append("")
    lines.append(
        f"<b>Club:</b> {format_progress(board['club_total_meters'], board['club_total_pledge'])}"
    )
    return "\n".join(lines)
