"""
Webhook ingestor.

Second producer into the activity ledger, next to the batch sync.
Webhooks carry no bearer token; the account is found by reverse lookup
of the Concept2 user ID.

Order of checks for `result-added`:
1. Unknown account -> acknowledged (200), nothing written
2. Machine type other than the synced one -> acknowledged (200), nothing written
3. Date outside the campaign window -> acknowledged (200), nothing written
4. Otherwise upsert + commit
"""

import logging
from dataclasses import dataclass
from typing import Optional

from app.db.session import Database
from app.features.accounts import AccountRepository
from app.features.activities import ActivityLedger
from app.shared.campaign import CampaignWindow
from .schemas import ResultAdded, ResultDeleted

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookOutcome:
    """HTTP status to answer with, plus a short description."""

    status_code: int
    message: str
    written: bool = False


class WebhookIngestor:
    """
    Applies parsed webhook events to the ledger.

    Usage:
        ingestor = WebhookIngestor(database, settings.campaign_window, "rower")
        outcome = await ingestor.handle(parse_event(payload))
    """

    def __init__(
        self,
        database: Database,
        window: CampaignWindow,
        activity_type: Optional[str] = None,
    ):
        self.database = database
        self.window = window
        self.activity_type = activity_type

    async def handle(self, event: ResultAdded | ResultDeleted) -> WebhookOutcome:
        """
        Apply one event.

        Raises:
            SQLAlchemyError: If the ledger write fails (answered with 500)
        """
        if isinstance(event, ResultAdded):
            return await self._result_added(event)
        return await self._result_deleted(event)

    async def _result_added(self, event: ResultAdded) -> WebhookOutcome:
        result = event.result

        async with self.database.session() as db:
            account = await AccountRepository(db).get_by_concept2_id(result.user_id)
            if account is None:
                logger.warning(
                    f"Webhook result {result.id} for unknown Concept2 user {result.user_id}, ignoring"
                )
                return WebhookOutcome(200, "Unknown account")

            if self.activity_type and result.type and result.type != self.activity_type:
                logger.info(
                    f"Webhook result {result.id} is a {result.type} workout, ignoring"
                )
                return WebhookOutcome(200, "Ignored activity type")

            if not self.window.contains(result.date):
                logger.warning(
                    f"Webhook result {result.id} dated {result.date.date()} "
                    f"is outside the campaign window, ignoring"
                )
                return WebhookOutcome(200, "Outside campaign window")

            await ActivityLedger(db).upsert(
                account_id=account.id,
                external_id=result.id,
                meters=result.distance,
                date=result.date,
                activity_type=result.type,
                verified=result.verified,
            )
            await db.commit()

        logger.info(
            f"Webhook stored result {result.id}: {result.distance} m for account {account.id}"
        )
        return WebhookOutcome(200, "Result stored", written=True)

    async def _result_deleted(self, event: ResultDeleted) -> WebhookOutcome:
        async with self.database.session() as db:
            removed = await ActivityLedger(db).delete(event.result_id)
            await db.commit()

        if removed:
            logger.info(f"Webhook deleted result {event.result_id}")
            return WebhookOutcome(200, "Result deleted", written=True)
        logger.info(f"Webhook delete for unknown result {event.result_id}, nothing to do")
        return WebhookOutcome(200, "Result not found")
