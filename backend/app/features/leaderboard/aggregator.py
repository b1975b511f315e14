"""
Leaderboard aggregation.

Pure read path over accounts and the activity ledger. Only verified
activities inside the window count; every account appears, including
those with nothing logged yet.
"""

import logging
from collections import defaultdict
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.accounts import AccountRepository
from app.features.activities import ActivityLedger
from app.shared.campaign import CampaignWindow
from app.shared.formatters import format_day
from .schemas import Leaderboard, LeaderboardEntry

logger = logging.getLogger(__name__)


class LeaderboardAggregator:
    """
    Computes per-account and club totals.

    Usage:
        aggregator = LeaderboardAggregator(db, settings.campaign_window)
        board = await aggregator.compute()
    """

    def __init__(self, db: AsyncSession, window: CampaignWindow):
        self.db = db
        self.window = window

    async def compute(self, window: Optional[CampaignWindow] = None) -> Leaderboard:
        """
        Build the leaderboard.

        Entries are sorted by total meters descending; ties go to the
        lower account ID.
        """
        window = window or self.window

        accounts = await AccountRepository(self.db).get_all()
        activities = await ActivityLedger(self.db).get_verified_in_window(window)

        totals: dict[int, int] = defaultdict(int)
        daily: dict[int, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        club_daily: dict[str, int] = defaultdict(int)

        for activity in activities:
            day = format_day(activity.date)
            totals[activity.account_id] += activity.meters
            daily[activity.account_id][day] += activity.meters
            club_daily[day] += activity.meters

        entries = [
            LeaderboardEntry(
                account_id=account.id,
                telegram_id=account.telegram_id,
                name=account.name,
                pledge_meters=account.pledge_meters or 0,
                total_meters=totals.get(account.id, 0),
                daily=dict(sorted(daily.get(account.id, {}).items())),
            )
            for account in accounts
        ]
        entries.sort(key=lambda e: (-e.total_meters, e.account_id))

        board = Leaderboard(
            start=window.start.isoformat(),
            end=window.end.isoformat(),
            entries=entries,
            club_total_meters=sum(e.total_meters for e in entries),
            club_total_pledge=sum(e.pledge_meters for e in entries),
            club_daily_totals=dict(sorted(club_daily.items())),
        )
        logger.debug(
            f"Leaderboard computed: {len(entries)} accounts, "
            f"{board.club_total_meters} m from {len(activities)} activities"
        )
        return board
