"""
Shared fixtures.

Every test gets its own in-memory SQLite database with all tables.
"""

from datetime import date, datetime
from typing import Optional

import pytest

from app.db.session import Database
from app.features.accounts import Account, AccountRepository
from app.features.activities import ActivityLedger
from app.shared.campaign import CampaignWindow

CAMPAIGN_START = date(2024, 1, 1)
CAMPAIGN_END = date(2024, 1, 14)


@pytest.fixture
def window() -> CampaignWindow:
    return CampaignWindow(start=CAMPAIGN_START, end=CAMPAIGN_END)


@pytest.fixture
async def database():
    db = Database("sqlite://")
    await db.open()
    await db.create_all()
    yield db
    await db.close()


async def make_account(
    database: Database,
    telegram_id: str,
    concept2_user_id: Optional[str] = None,
    access_token: Optional[str] = None,
    refresh_token: Optional[str] = None,
    pledge_meters: int = 0,
    display_name: Optional[str] = None,
) -> Account:
    """Create an account, optionally connected to Concept2."""
    async with database.session() as db:
        repo = AccountRepository(db)
        account = await repo.upsert_by_telegram_id(telegram_id, display_name=display_name)
        if access_token:
            account = await repo.install_credentials(
                account,
                access_token=access_token,
                refresh_token=refresh_token or f"refresh-{telegram_id}",
                concept2_user_id=concept2_user_id or f"c2-{telegram_id}",
            )
        if pledge_meters:
            account = await repo.set_pledge(account, pledge_meters)
        await db.commit()
        return account


async def add_activity(
    database: Database,
    account_id: int,
    external_id: str,
    meters: int,
    when: datetime,
    verified: bool = True,
    activity_type: str = "rower",
) -> None:
    async with database.session() as db:
        await ActivityLedger(db).upsert(
            account_id=account_id,
            external_id=external_id,
            meters=meters,
            date=when,
            activity_type=activity_type,
            verified=verified,
        )
        await db.commit()


def result_payload(
    result_id,
    meters: int,
    when: str = "2024-01-05 08:30:00",
    verified: bool = True,
    user_id=None,
    time: int = 12000,
    rtype: str = "rower",
) -> dict:
    """Concept2 result as returned by the Logbook API."""
    payload = {
        "id": result_id,
        "date": when,
        "distance": meters,
        "time": time,
        "type": rtype,
        "verified": verified,
    }
    if user_id is not None:
        payload["user_id"] = user_id
    return payload
