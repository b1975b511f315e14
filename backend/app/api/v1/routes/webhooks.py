"""
Concept2 Webhook Endpoint

Receives result-added / result-deleted pushes from the Logbook.
Mounted at settings.webhook_path, outside the /api/v1 prefix.

Responses:
- 200 on success or intentional no-op (unknown account, outside window)
- 400 on a malformed payload
- 401 when a webhook secret is configured and not presented
- 500 on unexpected failure
"""

import logging
import secrets

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.v1.deps import get_ingestor
from app.config import settings
from app.features.webhooks import WebhookIngestor, WebhookValidationError, parse_event

logger = logging.getLogger(__name__)

router = APIRouter()


def _authorized(request: Request) -> bool:
    if not settings.webhook_secret:
        return True
    presented = request.headers.get("Authorization", "")
    if presented.startswith("Bearer "):
        presented = presented[len("Bearer "):]
    return secrets.compare_digest(presented, settings.webhook_secret)


@router.post(settings.webhook_path, tags=["Webhooks"])
async def concept2_webhook(
    request: Request,
    ingestor: WebhookIngestor = Depends(get_ingestor),
) -> JSONResponse:
    """Apply one Concept2 webhook event to the activity ledger."""
    if not _authorized(request):
        logger.warning("Webhook rejected: bad or missing secret")
        return JSONResponse({"detail": "Unauthorized"}, status_code=401)

    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Webhook rejected: body is not JSON")
        return JSONResponse({"detail": "Body must be JSON"}, status_code=400)

    try:
        event = parse_event(payload)
    except WebhookValidationError as e:
        logger.warning(f"Webhook rejected: {e}")
        return JSONResponse({"detail": str(e)}, status_code=400)

    try:
        outcome = await ingestor.handle(event)
    except Exception:
        logger.exception(f"Webhook {event.type} failed")
        return JSONResponse({"detail": "Internal error"}, status_code=500)

    return JSONResponse({"detail": outcome.message}, status_code=outcome.status_code)
