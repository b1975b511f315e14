"""
Database Session Management

Provides the Database object: async engine + session factory with an
explicit open/close lifecycle. One instance is created by the application
lifespan (or by a test fixture) and passed to whoever needs sessions.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _get_async_url(url: str) -> str:
    """Convert sync database URL to async version."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    elif url == "sqlite://":
        return "sqlite+aiosqlite://"
    elif url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite+aiosqlite://", "sqlite+aiosqlite:///:memory:")


class Database:
    """
    Async database handle.

    Usage:
        db = Database("sqlite:///./rowbot.db")
        await db.open()
        async with db.session() as session:
            ...
        await db.close()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = _get_async_url(url)
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    async def open(self) -> None:
        """Create engine and session factory."""
        if self._engine is not None:
            return

        if _is_memory_sqlite(self.url):
            # One shared connection, otherwise every session sees an empty DB
            self._engine = create_async_engine(
                self.url,
                echo=self.echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif self.url.startswith("sqlite"):
            self._engine = create_async_engine(
                self.url,
                echo=self.echo,
                connect_args={"check_same_thread": False},
            )
        elif self.url.startswith("postgresql"):
            # PostgreSQL with connection pool settings
            self._engine = create_async_engine(
                self.url,
                echo=self.echo,
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_recycle=1800,  # 30 minutes
            )
        else:
            self._engine = create_async_engine(self.url, echo=self.echo)

        self._sessionmaker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False
        )
        logger.info(f"Database opened: {self._engine.url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        """Dispose engine and drop the session factory."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("Database closed")

    async def create_all(self) -> None:
        """Create all tables (first boot and tests; production uses Alembic)."""
        from app.models import Base, load_all_models

        load_all_models()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session; anything left uncommitted is rolled back on close."""
        if self._sessionmaker is None:
            raise RuntimeError("Database is not open")
        async with self._sessionmaker() as session:
            yield session


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session."""
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session
