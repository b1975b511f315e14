"""
Photo verification service.

Matches a meter reading (taken from a photographed PM5 monitor) against
the account's logged workouts and marks the match as verified, which
makes it count on the leaderboard.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.accounts import AccountRepository
from app.features.activities import Activity, ActivityLedger

logger = logging.getLogger(__name__)


class VerificationError(Exception):
    """Base verification error."""
    pass


class AccountNotFoundError(VerificationError):
    """No account for this chat user."""
    pass


class NoMatchingActivityError(VerificationError):
    """No unverified workout with the photographed distance."""
    pass


class VerificationService:
    """
    Usage:
        activity = await VerificationService(db).verify_meters("123", 5000)
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.accounts = AccountRepository(db)
        self.ledger = ActivityLedger(db)

    async def verify_meters(self, telegram_id: str | int, meters: int) -> Activity:
        """
        Verify the most recent unverified workout with exactly `meters`.

        Raises:
            AccountNotFoundError: Unknown chat user
            NoMatchingActivityError: Nothing to verify at that distance
        """
        account = await self.accounts.get_by_telegram_id(telegram_id)
        if account is None:
            raise AccountNotFoundError(f"No account for telegram_id={telegram_id}")

        activity = await self.ledger.find_unverified_by_meters(account.id, meters)
        if activity is None:
            raise NoMatchingActivityError(
                f"No unverified activity of {meters} m for account {account.id}"
            )

        await self.ledger.verify(activity.id)
        await self.db.commit()
        activity.verified = True

        logger.info(
            f"Verified activity {activity.concept2_result_id} ({meters} m) "
            f"for telegram_id={telegram_id}"
        )
        return activity
