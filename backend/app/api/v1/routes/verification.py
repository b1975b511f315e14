"""
Verification Routes

Called by the bot after it has read the meters off a monitor photo.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.features.verification import (
    AccountNotFoundError,
    ActivityResponse,
    NoMatchingActivityError,
    VerificationService,
    VerifyMetersRequest,
)

router = APIRouter()


@router.post("/verification/{telegram_id}", response_model=ActivityResponse)
async def verify_meters(
    telegram_id: str,
    request: VerifyMetersRequest,
    db: AsyncSession = Depends(get_db),
):
    """Mark the user's latest unverified workout of that distance as verified."""
    try:
        activity = await VerificationService(db).verify_meters(telegram_id, request.meters)
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except NoMatchingActivityError:
        raise HTTPException(
            status_code=404,
            detail=f"No unverified workout of {request.meters} m found"
        )
    return ActivityResponse.model_validate(activity)
