"""
Activity ledger.

Append/upsert/delete store of workouts. Every write from either producer
(batch sync or webhook) goes through `upsert`, which is a single
INSERT ... ON CONFLICT statement on the Concept2 result ID, so replays
and races converge on one row without application-level locking.
"""

import logging
from datetime import datetime

from sqlalchemy import select, delete, update, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.upsert import insert_for
from app.shared.campaign import CampaignWindow
from app.shared.repository import BaseRepository
from .models import Activity

logger = logging.getLogger(__name__)


class ActivityLedger(BaseRepository[Activity]):
    """
    Repository for activities.

    Like every repository it flushes but never commits.

    Usage:
        ledger = ActivityLedger(db)
        await ledger.upsert(account.id, "123", 5000, date, "rower", True)
        await db.commit()
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, Activity)

    async def upsert(
        self,
        account_id: int,
        external_id: str | int,
        meters: int,
        date: datetime,
        activity_type: str | None,
        verified: bool = False,
    ) -> None:
        """
        Insert a workout or overwrite meters/verified of an existing one.

        On conflict the original account, date and type are kept.

        Args:
            account_id: Owning account (used only on insert)
            external_id: Concept2 result ID
            meters: Distance in meters
            date: Workout timestamp
            activity_type: Concept2 machine type
            verified: Provider- or photo-asserted verification flag
        """
        now = datetime.utcnow()
        stmt = insert_for(self.db, Activity.__table__).values(
            account_id=account_id,
            concept2_result_id=str(external_id),
            meters=int(meters),
            date=date,
            activity_type=activity_type,
            verified=bool(verified),
            synced_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Activity.concept2_result_id],
            set_={
                "meters": stmt.excluded.meters,
                "verified": stmt.excluded.verified,
                "synced_at": stmt.excluded.synced_at,
            },
        )
        await self.db.execute(stmt)

    async def delete(self, external_id: str | int) -> bool:
        """
        Delete the workout with this Concept2 result ID.

        Returns:
            True if a row was removed, False if none existed
        """
        result = await self.db.execute(
            delete(Activity)
            .where(Activity.concept2_result_id == str(external_id))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def get_by_external_id(self, external_id: str | int) -> Activity | None:
        return await self.get_by(concept2_result_id=str(external_id))

    async def get(self, account_id: int, window: CampaignWindow) -> list[Activity]:
        """
        Workouts of one account inside the window, oldest first.

        Includes unverified workouts.
        """
        result = await self.db.execute(
            select(Activity)
            .where(Activity.account_id == account_id)
            .where(Activity.date >= window.starts_at)
            .where(Activity.date < window.ends_before)
            .order_by(Activity.date, Activity.id)
        )
        return list(result.scalars().all())

    async def get_verified_in_window(self, window: CampaignWindow) -> list[Activity]:
        """Verified workouts of all accounts inside the window."""
        result = await self.db.execute(
            select(Activity)
            .where(Activity.verified.is_(True))
            .where(Activity.date >= window.starts_at)
            .where(Activity.date < window.ends_before)
            .order_by(Activity.account_id, Activity.date)
        )
        return list(result.scalars().all())

    async def verify(self, activity_id: int) -> bool:
        """
        Mark a workout as verified.

        Returns:
            True if the workout exists
        """
        result = await self.db.execute(
            update(Activity)
            .where(Activity.id == activity_id)
            .values(verified=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            logger.info(f"Activity {activity_id} verified")
        return result.rowcount > 0

    async def find_unverified_by_meters(
        self,
        account_id: int,
        meters: int,
    ) -> Activity | None:
        """
        Most recent unverified workout of an account with exactly this distance.

        Used to match a photographed monitor reading to a logged workout.
        """
        result = await self.db.execute(
            select(Activity)
            .where(Activity.account_id == account_id)
            .where(Activity.meters == meters)
            .where(Activity.verified.is_(False))
            .order_by(desc(Activity.date), desc(Activity.id))
            .limit(1)
        )
        return result.scalar_one_or_none()
