"""
Tests for the campaign window.
"""

from datetime import date, datetime

import pytest

from app.shared.campaign import CampaignWindow
from app.shared.formatters import format_day, format_meters, format_progress


class TestCampaignWindow:
    """Inclusive date-range semantics."""

    def test_start_and_end_days_are_inside(self):
        window = CampaignWindow(date(2024, 1, 1), date(2024, 1, 14))
        assert window.contains(date(2024, 1, 1))
        assert window.contains(date(2024, 1, 14))

    def test_whole_end_day_counts(self):
        """A workout late on the last day is still inside."""
        window = CampaignWindow(date(2024, 1, 1), date(2024, 1, 14))
        assert window.contains(datetime(2024, 1, 14, 23, 59, 59))
        assert not window.contains(datetime(2024, 1, 15, 0, 0, 0))

    def test_day_before_start_is_outside(self):
        window = CampaignWindow(date(2024, 1, 1), date(2024, 1, 14))
        assert not window.contains(datetime(2023, 12, 31, 23, 59))

    def test_bounds(self):
        window = CampaignWindow(date(2024, 1, 1), date(2024, 1, 2))
        assert window.starts_at == datetime(2024, 1, 1)
        assert window.ends_before == datetime(2024, 1, 3)

    def test_days(self):
        window = CampaignWindow(date(2024, 1, 30), date(2024, 2, 2))
        assert window.days() == [
            date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)
        ]

    def test_single_day_window(self):
        window = CampaignWindow(date(2024, 1, 5), date(2024, 1, 5))
        assert window.days() == [date(2024, 1, 5)]

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            CampaignWindow(date(2024, 1, 14), date(2024, 1, 1))


class TestFormatters:

    def test_format_meters(self):
        assert format_meters(12500) == "12,500 m"
        assert format_meters(0) == "0 m"
        assert format_meters(None) == "—"

    def test_format_day(self):
        assert format_day(datetime(2024, 1, 5, 23, 10)) == "2024-01-05"
        assert format_day(date(2024, 1, 5)) == "2024-01-05"

    def test_format_progress(self):
        assert format_progress(5000, 50000) == "5,000 m of 50,000 m (10%)"
        assert format_progress(5000, 0) == "5,000 m"
