"""
Campaign window.

The pledge campaign runs over an inclusive range of calendar days.
Activities count only when their recorded date falls on one of those days.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta


@dataclass(frozen=True)
class CampaignWindow:
    """Inclusive calendar-date range [start, end]."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Window start {self.start} is after end {self.end}")

    @property
    def starts_at(self) -> datetime:
        """First instant inside the window."""
        return datetime.combine(self.start, time.min)

    @property
    def ends_before(self) -> datetime:
        """First instant after the window (exclusive upper bound)."""
        return datetime.combine(self.end + timedelta(days=1), time.min)

    def contains(self, value: date | datetime) -> bool:
        """Check whether a date or timestamp falls on a campaign day."""
        day = value.date() if isinstance(value, datetime) else value
        return self.start <= day <= self.end

    def days(self) -> list[date]:
        """All calendar days in the window, in order."""
        count = (self.end - self.start).days + 1
        return [self.start + timedelta(days=i) for i in range(count)]
