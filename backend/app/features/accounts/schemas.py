"""
Account schemas.

Pydantic models for account API requests and responses.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PledgeRequest(BaseModel):
    """Set a pledge for a chat user (creates the account if needed)."""
    meters: int = Field(..., ge=0)
    username: Optional[str] = None
    display_name: Optional[str] = None


class AccountResponse(BaseModel):
    """Public view of an account (no credentials)."""
    telegram_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    pledge_meters: int = 0
    connected: bool = False

    @classmethod
    def from_account(cls, account) -> "AccountResponse":
        return cls(
            telegram_id=account.telegram_id,
            username=account.username,
            display_name=account.display_name,
            pledge_meters=account.pledge_meters or 0,
            connected=account.has_credentials,
        )
