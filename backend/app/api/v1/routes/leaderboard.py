"""
Leaderboard Routes

Read-only campaign views:
- /leaderboard - ranked verified totals
- /config - campaign window
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_window
from app.db.session import get_db
from app.features.leaderboard import Leaderboard, LeaderboardAggregator
from app.shared.campaign import CampaignWindow

router = APIRouter()


@router.get("/leaderboard", response_model=Leaderboard)
async def get_leaderboard(
    window: CampaignWindow = Depends(get_window),
    db: AsyncSession = Depends(get_db),
):
    """Verified meters per participant and for the whole club."""
    return await LeaderboardAggregator(db, window).compute()


@router.get("/config")
async def get_config(window: CampaignWindow = Depends(get_window)):
    """Campaign window as ISO dates."""
    return {"start": window.start.isoformat(), "end": window.end.isoformat()}
