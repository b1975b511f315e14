"""
Tests for chat-side parsing and rendering.
"""

import pytest

from bot.handlers.pledge import parse_meters
from bot.utils.formatters import format_leaderboard


@pytest.mark.parametrize("text, expected", [
    ("50000", 50000),
    ("50,000", 50000),
    ("100_000 meters", 100000),
    (" 0 ", 0),
    ("", None),
    (None, None),
    ("-5", None),
    ("lots", None),
    ("12.5", None),
])
def test_parse_meters(text, expected):
    assert parse_meters(text) == expected


def board(entries) -> dict:
    return {
        "start": "2024-01-01",
        "end": "2024-01-14",
        "entries": entries,
        "club_total_meters": sum(e["total_meters"] for e in entries),
        "club_total_pledge": sum(e["pledge_meters"] for e in entries),
        "club_daily_totals": {},
    }


def entry(name, total, pledge=0) -> dict:
    return {"name": name, "total_meters": total, "pledge_meters": pledge}


class TestFormatLeaderboard:

    def test_ranks_and_progress(self):
        text = format_leaderboard(board([
            entry("Ada", 10000, 50000),
            entry("Bob", 4000),
        ]))

        assert "2024-01-01" in text and "2024-01-14" in text
        assert "🥇 Ada: 10,000 m of 50,000 m (20%)" in text
        assert "🥈 Bob: 4,000 m" in text
        assert "14,000 m of 50,000 m (28%)" in text

    def test_names_are_escaped(self):
        text = format_leaderboard(board([entry("<b>Eve</b>", 1)]))
        assert "&lt;b&gt;Eve&lt;/b&gt;" in text

    def test_limit(self):
        entries = [entry(f"r{i}", 100 - i) for i in range(15)]
        text = format_leaderboard(board(entries), limit=5)
        assert "5. r4" in text
        assert "r5" not in text

    def test_empty(self):
        assert "Nobody has signed up yet." in format_leaderboard(board([]))
