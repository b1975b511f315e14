"""
User Routes

Accounts as seen from the chat side: registration and pledges.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.features.accounts import AccountRepository, AccountResponse, PledgeRequest

router = APIRouter()


class RegisterRequest(BaseModel):
    """Chat names to store on first contact."""
    username: Optional[str] = None
    display_name: Optional[str] = None


@router.get("/{telegram_id}", response_model=AccountResponse)
async def get_user(telegram_id: str, db: AsyncSession = Depends(get_db)):
    """Get account by Telegram ID."""
    account = await AccountRepository(db).get_by_telegram_id(telegram_id)
    if not account:
        raise HTTPException(status_code=404, detail="User not found")
    return AccountResponse.from_account(account)


@router.put("/{telegram_id}", response_model=AccountResponse)
async def register_user(
    telegram_id: str,
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create the account on first interaction, or refresh its names."""
    account = await AccountRepository(db).upsert_by_telegram_id(
        telegram_id, request.username, request.display_name
    )
    await db.commit()
    return AccountResponse.from_account(account)


@router.post("/{telegram_id}/pledge", response_model=AccountResponse)
async def set_pledge(
    telegram_id: str,
    request: PledgeRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Set the campaign pledge.

    Creates the user if it doesn't exist.
    """
    repo = AccountRepository(db)
    account = await repo.upsert_by_telegram_id(
        telegram_id, request.username, request.display_name
    )
    account = await repo.set_pledge(account, request.meters)
    await db.commit()
    return AccountResponse.from_account(account)
