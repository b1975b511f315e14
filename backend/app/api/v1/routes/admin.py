"""
Admin Routes

Protected by X-API-Key header (shared secret with the bot).
"""

import logging

from fastapi import APIRouter, Depends

from app.api.v1.deps import get_scheduler, verify_api_key
from app.features.sync import BatchSyncScheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/sync", dependencies=[Depends(verify_api_key)])
async def trigger_sync(scheduler: BatchSyncScheduler = Depends(get_scheduler)):
    """
    Run a batch sync now and wait for it.

    Waits for a scheduled run in progress to finish first.
    """
    if scheduler.running:
        logger.info("Manual sync requested while a run is in progress, waiting")
    processed = await scheduler.run_sync()
    return {"processed": processed}
