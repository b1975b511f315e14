"""
Tests for LeaderboardAggregator.
"""

from datetime import date, datetime

import pytest

from app.features.leaderboard import LeaderboardAggregator
from app.shared.campaign import CampaignWindow

from conftest import add_activity, make_account


async def compute(database, window, override=None):
    async with database.session() as db:
        return await LeaderboardAggregator(db, window).compute(override)


class TestLeaderboard:

    @pytest.mark.asyncio
    async def test_empty(self, database, window):
        board = await compute(database, window)

        assert board.entries == []
        assert board.club_total_meters == 0
        assert board.club_total_pledge == 0
        assert board.club_daily_totals == {}
        assert (board.start, board.end) == ("2024-01-01", "2024-01-14")

    @pytest.mark.asyncio
    async def test_accounts_without_activity_appear_with_zero(self, database, window):
        account = await make_account(database, "1", pledge_meters=10000)

        board = await compute(database, window)

        assert len(board.entries) == 1
        entry = board.entries[0]
        assert entry.account_id == account.id
        assert entry.total_meters == 0
        assert entry.daily == {}
        assert board.club_total_pledge == 10000

    @pytest.mark.asyncio
    async def test_unverified_never_counts(self, database, window):
        account = await make_account(database, "1")
        await add_activity(database, account.id, "v", 5000, datetime(2024, 1, 3), verified=True)
        await add_activity(database, account.id, "u", 9000, datetime(2024, 1, 3), verified=False)

        board = await compute(database, window)

        assert board.entries[0].total_meters == 5000
        assert board.club_total_meters == 5000

    @pytest.mark.asyncio
    async def test_window_bounds(self, database, window):
        account = await make_account(database, "1")
        await add_activity(database, account.id, "a", 1000, datetime(2023, 12, 31, 23, 0))
        await add_activity(database, account.id, "b", 2000, datetime(2024, 1, 1, 0, 0))
        await add_activity(database, account.id, "c", 3000, datetime(2024, 1, 14, 23, 59))
        await add_activity(database, account.id, "d", 4000, datetime(2024, 1, 15, 0, 1))

        board = await compute(database, window)

        assert board.entries[0].total_meters == 5000
        assert board.entries[0].daily == {"2024-01-01": 2000, "2024-01-14": 3000}

    @pytest.mark.asyncio
    async def test_window_override(self, database, window):
        account = await make_account(database, "1")
        await add_activity(database, account.id, "a", 1000, datetime(2024, 2, 2))

        board = await compute(database, window, CampaignWindow(date(2024, 2, 1), date(2024, 2, 3)))

        assert board.entries[0].total_meters == 1000
        assert board.start == "2024-02-01"

    @pytest.mark.asyncio
    async def test_sorted_desc_with_ties_by_account_id(self, database, window):
        a = await make_account(database, "a")
        b = await make_account(database, "b")
        c = await make_account(database, "c")
        await add_activity(database, c.id, "c1", 8000, datetime(2024, 1, 2))
        await add_activity(database, a.id, "a1", 3000, datetime(2024, 1, 2))
        await add_activity(database, b.id, "b1", 3000, datetime(2024, 1, 2))

        board = await compute(database, window)

        assert [e.account_id for e in board.entries] == [c.id, a.id, b.id]

    @pytest.mark.asyncio
    async def test_club_totals_and_daily(self, database, window):
        a = await make_account(database, "a", pledge_meters=20000)
        b = await make_account(database, "b", pledge_meters=30000)
        await add_activity(database, a.id, "a1", 5000, datetime(2024, 1, 2, 7))
        await add_activity(database, a.id, "a2", 2000, datetime(2024, 1, 2, 19))
        await add_activity(database, b.id, "b1", 6000, datetime(2024, 1, 2, 12))
        await add_activity(database, b.id, "b2", 1000, datetime(2024, 1, 4, 12))

        board = await compute(database, window)

        assert board.club_total_meters == 14000
        assert board.club_total_pledge == 50000
        assert board.club_daily_totals == {"2024-01-02": 13000, "2024-01-04": 1000}
        entry_a = next(e for e in board.entries if e.account_id == a.id)
        assert entry_a.daily == {"2024-01-02": 7000}
        assert sum(e.total_meters for e in board.entries) == board.club_total_meters

    @pytest.mark.asyncio
    async def test_display_name_fallback(self, database, window):
        await make_account(database, "42", display_name="Ada")
        await make_account(database, "43")

        board = await compute(database, window)

        assert {e.name for e in board.entries} == {"Ada", "user 43"}
