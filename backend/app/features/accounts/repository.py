"""
Account repository.

Data access layer for Account. The webhook path looks accounts up by
Concept2 user id; chat commands by Telegram id.
"""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.upsert import insert_for
from app.shared.repository import BaseRepository
from .models import Account


class AccountRepository(BaseRepository[Account]):
    """Repository for Account operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Account)

    async def get_by_telegram_id(self, telegram_id: str | int) -> Account | None:
        """
        Get account by Telegram ID.

        Args:
            telegram_id: User's Telegram ID

        Returns:
            Account if found, None otherwise
        """
        return await self.get_by(telegram_id=str(telegram_id))

    async def get_by_concept2_id(self, concept2_user_id: str | int) -> Account | None:
        """
        Reverse lookup by Concept2 Logbook user ID.

        Args:
            concept2_user_id: ID from the provider (webhook `user_id`)

        Returns:
            Account if bound to that ID, None otherwise
        """
        return await self.get_by(concept2_user_id=str(concept2_user_id))

    async def upsert_by_telegram_id(
        self,
        telegram_id: str | int,
        username: str | None = None,
        display_name: str | None = None,
    ) -> Account:
        """
        Create account or refresh its chat names.

        Uses INSERT ... ON CONFLICT so two first interactions racing on the
        same Telegram ID still produce one row. Names are only overwritten
        when a value is given.

        Returns:
            The stored account
        """
        telegram_id = str(telegram_id)
        now = datetime.utcnow()
        stmt = insert_for(self.db, Account.__table__).values(
            telegram_id=telegram_id,
            username=username,
            display_name=display_name,
            pledge_meters=0,
            created_at=now,
            updated_at=now,
        )
        changes = {"updated_at": now}
        if username is not None:
            changes["username"] = stmt.excluded.username
        if display_name is not None:
            changes["display_name"] = stmt.excluded.display_name
        stmt = stmt.on_conflict_do_update(
            index_elements=[Account.telegram_id],
            set_=changes,
        )
        await self.db.execute(stmt)

        result = await self.db.execute(
            select(Account)
            .where(Account.telegram_id == telegram_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def set_pledge(self, account: Account, meters: int) -> Account:
        """
        Store the campaign pledge.

        Raises:
            ValueError: If meters is negative
        """
        if meters < 0:
            raise ValueError("Pledge must be a non-negative number of meters")
        return await self.update(account, pledge_meters=meters, updated_at=datetime.utcnow())

    async def list_with_tokens(self) -> list[Account]:
        """Accounts holding a non-empty access token, ordered by ID."""
        result = await self.db.execute(
            select(Account)
            .where(Account.access_token.is_not(None))
            .where(Account.access_token != "")
            .order_by(Account.id)
        )
        return list(result.scalars().all())

    async def install_credentials(
        self,
        account: Account,
        access_token: str,
        refresh_token: str,
        concept2_user_id: str | int,
    ) -> Account:
        """
        Store the first token pair and bind the Concept2 user ID.

        Any other account previously bound to the same Concept2 ID is
        unbound first (the user re-connected from a different chat).
        """
        concept2_user_id = str(concept2_user_id)
        await self.db.execute(
            update(Account)
            .where(Account.concept2_user_id == concept2_user_id)
            .where(Account.id != account.id)
            .values(concept2_user_id=None, access_token=None, refresh_token=None)
        )
        return await self.update(
            account,
            access_token=access_token,
            refresh_token=refresh_token,
            concept2_user_id=concept2_user_id,
            updated_at=datetime.utcnow(),
        )

    async def swap_tokens(
        self,
        account_id: int,
        expected_refresh_token: str,
        access_token: str,
        refresh_token: str,
    ) -> bool:
        """
        Replace both tokens in one statement, only if the stored refresh
        token is still the one that was exchanged.

        Returns:
            True if the row was updated, False if another writer got there first
        """
        result = await self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .where(Account.refresh_token == expected_refresh_token)
            .values(
                access_token=access_token,
                refresh_token=refresh_token,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
