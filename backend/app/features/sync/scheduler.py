"""
Batch sync.

Pulls every connected account's results for the campaign window from the
Concept2 Logbook and writes them through the ActivityLedger.

Per-account flow:
1. Fetch results with the stored access token
2. On 401: refresh once, retry the fetch once
3. Upsert every result, commit

Any failure skips that account for this run only; the next run plus
upsert idempotence repairs whatever was missed.
"""

import asyncio
import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.db.session import Database
from app.features.accounts import Account, AccountRepository
from app.features.activities import ActivityLedger
from app.features.concept2 import (
    Concept2Client,
    Concept2APIError,
    Concept2AuthError,
    Concept2Result,
    RefreshError,
    TokenManager,
)
from app.shared.campaign import CampaignWindow
from .config import SyncConfig

logger = logging.getLogger(__name__)


class BatchSyncScheduler:
    """
    Batch sync over all connected accounts.

    Usage:
        scheduler = BatchSyncScheduler(database, client, tokens, window)
        processed = await scheduler.run_sync()
    """

    def __init__(
        self,
        database: Database,
        client: Concept2Client,
        tokens: TokenManager,
        window: CampaignWindow,
        activity_type: Optional[str] = SyncConfig.DEFAULT_ACTIVITY_TYPE,
        api_call_delay: float = 0.0,
    ):
        self.database = database
        self.client = client
        self.tokens = tokens
        self.window = window
        self.activity_type = activity_type
        self.api_call_delay = api_call_delay
        self._run_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._run_lock.locked()

    async def run_sync(self, window: Optional[CampaignWindow] = None) -> int:
        """
        Sync all accounts holding an access token.

        Args:
            window: Date range to pull (defaults to the campaign window)

        Returns:
            Number of accounts whose fetch succeeded and whose results were
            stored, including accounts with zero results
        """
        window = window or self.window

        async with self._run_lock:
            async with self.database.session() as db:
                accounts = await AccountRepository(db).list_with_tokens()

            logger.info(
                f"Sync started: {len(accounts)} accounts, "
                f"window {window.start}..{window.end}"
            )

            processed = 0
            for i, account in enumerate(accounts):
                if i and self.api_call_delay:
                    await asyncio.sleep(self.api_call_delay)
                try:
                    if await self._sync_account(account, window):
                        processed += 1
                except Exception:
                    logger.exception(f"Unexpected error syncing account {account.id}")

            logger.info(f"Sync complete: {processed}/{len(accounts)} accounts processed")
            return processed

    async def _sync_account(self, account: Account, window: CampaignWindow) -> bool:
        """Sync one account. Returns False when it was skipped."""
        try:
            results = await self._fetch_with_refresh(account, window)
        except RefreshError as e:
            logger.warning(f"Skipping account {account.id}: {e}")
            return False
        except Concept2AuthError:
            logger.warning(f"Skipping account {account.id}: still unauthorized after refresh")
            return False
        except Concept2APIError as e:
            logger.warning(f"Skipping account {account.id}: {e}")
            return False

        try:
            stored = await self._store(account, results)
        except SQLAlchemyError as e:
            logger.error(f"Failed to store results for account {account.id}: {e}")
            return False

        logger.info(f"Account {account.id}: {stored}/{len(results)} results stored")
        return True

    async def _fetch_with_refresh(
        self,
        account: Account,
        window: CampaignWindow,
    ) -> list[dict]:
        """Fetch results; on 401 refresh once and retry exactly once."""
        token = await self.tokens.get_valid_token(account)
        try:
            return await self.client.get_results(token, window, self.activity_type)
        except Concept2AuthError:
            logger.info(f"Token expired for account {account.id}, attempting refresh...")

        new_token = await self.tokens.refresh(account, stale_access_token=token)
        return await self.client.get_results(new_token, window, self.activity_type)

    async def _store(self, account: Account, results: list[dict]) -> int:
        """Upsert results in one transaction. Returns the number written."""
        stored = 0
        async with self.database.session() as db:
            ledger = ActivityLedger(db)
            for raw in results:
                try:
                    result = Concept2Result.model_validate(raw)
                except ValidationError as e:
                    logger.warning(
                        f"Skipping malformed result for account {account.id}: "
                        f"{raw.get('id') if isinstance(raw, dict) else raw!r} "
                        f"({e.error_count()} errors)"
                    )
                    continue

                await ledger.upsert(
                    account_id=account.id,
                    external_id=result.id,
                    meters=result.distance,
                    date=result.date,
                    activity_type=result.type,
                    verified=result.verified,
                )
                stored += 1
            await db.commit()
        return stored
