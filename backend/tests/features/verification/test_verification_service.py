"""
Tests for VerificationService.
"""

from datetime import datetime

import pytest

from app.features.activities import ActivityLedger
from app.features.verification import (
    AccountNotFoundError,
    NoMatchingActivityError,
    VerificationService,
)

from conftest import add_activity, make_account


class TestVerifyMeters:

    @pytest.mark.asyncio
    async def test_verifies_latest_match(self, database):
        account = await make_account(database, "100")
        await add_activity(database, account.id, "old", 5000, datetime(2024, 1, 2), verified=False)
        await add_activity(database, account.id, "new", 5000, datetime(2024, 1, 3), verified=False)

        async with database.session() as db:
            activity = await VerificationService(db).verify_meters("100", 5000)

        assert activity.concept2_result_id == "new"
        assert activity.verified is True
        async with database.session() as db:
            ledger = ActivityLedger(db)
            assert (await ledger.get_by_external_id("new")).verified is True
            assert (await ledger.get_by_external_id("old")).verified is False

    @pytest.mark.asyncio
    async def test_unknown_user(self, database):
        async with database.session() as db:
            with pytest.raises(AccountNotFoundError):
                await VerificationService(db).verify_meters("404", 5000)

    @pytest.mark.asyncio
    async def test_no_matching_activity(self, database):
        account = await make_account(database, "100")
        await add_activity(database, account.id, "done", 5000, datetime(2024, 1, 2), verified=True)

        async with database.session() as db:
            with pytest.raises(NoMatchingActivityError):
                await VerificationService(db).verify_meters("100", 5000)
