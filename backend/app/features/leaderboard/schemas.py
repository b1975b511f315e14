"""
Leaderboard schemas.

Derived values, never persisted.
"""

from pydantic import BaseModel, Field


class LeaderboardEntry(BaseModel):
    """Totals of one participant."""
    account_id: int
    telegram_id: str
    name: str
    pledge_meters: int = 0
    total_meters: int = 0
    daily: dict[str, int] = Field(default_factory=dict)  # YYYY-MM-DD -> meters

    @property
    def pledge_progress(self) -> float | None:
        if not self.pledge_meters:
            return None
        return self.total_meters / self.pledge_meters


class Leaderboard(BaseModel):
    """Participants ranked by verified meters, plus club totals."""
    start: str
    end: str
    entries: list[LeaderboardEntry] = Field(default_factory=list)
    club_total_meters: int = 0
    club_total_pledge: int = 0
    club_daily_totals: dict[str, int] = Field(default_factory=dict)
