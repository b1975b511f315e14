"""
Base repository with common read/update operations.

Feature repositories (AccountRepository, ActivityLedger) subclass it and
add their own queries; writes that must be idempotent use dialect upserts
from app.db.upsert instead of ORM inserts.

Usage:
    class AccountRepository(BaseRepository[Account]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Account)

        async def get_by_telegram_id(self, telegram_id: str) -> Account | None:
            return await self.get_by(telegram_id=telegram_id)
"""

from typing import TypeVar, Generic, Type

from sqlalchemy import Select, select, func
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository for database operations.

    Repositories flush but never commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def _filtered(self, query: Select, filters: dict) -> Select:
        for key, value in filters.items():
            query = query.where(getattr(self.model, key) == value)
        return query

    async def get_by_id(self, id: int) -> T | None:
        """Get entity by primary key, bypassing stale identity-map state."""
        return await self.db.get(self.model, id, populate_existing=True)

    async def get_by(self, **filters) -> T | None:
        """
        Get single entity by field values.

        Args:
            **filters: Field name-value pairs; all must match

        Returns:
            The matching entity or None
        """
        result = await self.db.execute(self._filtered(select(self.model), filters))
        return result.scalar_one_or_none()

    async def get_all(self, **filters) -> list[T]:
        """All matching entities ordered by primary key."""
        query = self._filtered(select(self.model).order_by(self.model.id), filters)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update(self, entity: T, **values) -> T:
        """Set fields on a loaded entity and flush."""
        for key, value in values.items():
            setattr(entity, key, value)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def count(self, **filters) -> int:
        """Number of matching entities."""
        query = self._filtered(select(func.count()).select_from(self.model), filters)
        result = await self.db.execute(query)
        return result.scalar() or 0
