"""
Tests for WebhookIngestor.
"""

import logging
from datetime import datetime

import pytest

from app.features.activities import ActivityLedger
from app.features.webhooks import WebhookIngestor, parse_event

from conftest import add_activity, make_account


def added_event(
    result_id=555,
    user_id="777",
    when="2024-01-05 08:30:00",
    meters=5000,
    verified=True,
    rtype="rower",
):
    return parse_event({
        "type": "result-added",
        "result": {
            "id": result_id,
            "user_id": user_id,
            "date": when,
            "distance": meters,
            "time": 12000,
            "type": rtype,
            "verified": verified,
        },
    })


async def ledger_count(database) -> int:
    async with database.session() as db:
        return await ActivityLedger(db).count()


class TestResultAdded:

    @pytest.mark.asyncio
    async def test_stores_for_known_account(self, database, window):
        account = await make_account(database, "1", concept2_user_id="777", access_token="t")

        outcome = await WebhookIngestor(database, window).handle(added_event())

        assert outcome.status_code == 200
        assert outcome.written
        async with database.session() as db:
            activity = await ActivityLedger(db).get_by_external_id("555")
        assert activity.account_id == account.id
        assert activity.meters == 5000
        assert activity.verified is True

    @pytest.mark.asyncio
    async def test_unknown_account_is_acknowledged(self, database, window, caplog):
        outcome = await WebhookIngestor(database, window).handle(added_event(user_id="999"))

        assert outcome.status_code == 200
        assert not outcome.written
        assert await ledger_count(database) == 0
        assert "999" in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("when", ["2023-12-31 23:59:00", "2024-01-15 00:00:00"])
    async def test_outside_window_is_noop(self, database, window, when):
        await make_account(database, "1", concept2_user_id="777", access_token="t")

        outcome = await WebhookIngestor(database, window).handle(added_event(when=when))

        assert outcome.status_code == 200
        assert not outcome.written
        assert await ledger_count(database) == 0

    @pytest.mark.asyncio
    async def test_outside_window_logs_warning(self, database, window, caplog):
        await make_account(database, "1", concept2_user_id="777", access_token="t")

        with caplog.at_level(logging.WARNING, logger="app.features.webhooks.ingestor"):
            await WebhookIngestor(database, window).handle(added_event(when="2024-02-01"))

        assert any(
            r.levelno == logging.WARNING and "outside the campaign window" in r.getMessage()
            for r in caplog.records
        )

    @pytest.mark.asyncio
    async def test_other_machine_type_is_ignored(self, database, window):
        await make_account(database, "1", concept2_user_id="777", access_token="t")
        ingestor = WebhookIngestor(database, window, activity_type="rower")

        outcome = await ingestor.handle(added_event(rtype="skierg", meters=4000))

        assert outcome.status_code == 200
        assert not outcome.written
        assert await ledger_count(database) == 0

    @pytest.mark.asyncio
    async def test_untyped_result_counts_for_filtered_ingestor(self, database, window):
        await make_account(database, "1", concept2_user_id="777", access_token="t")
        ingestor = WebhookIngestor(database, window, activity_type="rower")
        event = added_event()
        event.result.type = None

        outcome = await ingestor.handle(event)

        assert outcome.written

    @pytest.mark.asyncio
    async def test_last_day_evening_counts(self, database, window):
        await make_account(database, "1", concept2_user_id="777", access_token="t")

        outcome = await WebhookIngestor(database, window).handle(
            added_event(when="2024-01-14T22:15:00")
        )

        assert outcome.written
        assert await ledger_count(database) == 1

    @pytest.mark.asyncio
    async def test_replay_updates_single_row(self, database, window):
        await make_account(database, "1", concept2_user_id="777", access_token="t")
        ingestor = WebhookIngestor(database, window)

        await ingestor.handle(added_event(meters=5000, verified=False))
        await ingestor.handle(added_event(meters=5100, verified=True))

        async with database.session() as db:
            ledger = ActivityLedger(db)
            assert await ledger.count() == 1
            activity = await ledger.get_by_external_id("555")
        assert (activity.meters, activity.verified) == (5100, True)


class TestResultDeleted:

    @pytest.mark.asyncio
    async def test_deletes_existing(self, database, window):
        account = await make_account(database, "1", concept2_user_id="777", access_token="t")
        await add_activity(database, account.id, "555", 5000, datetime(2024, 1, 5))

        outcome = await WebhookIngestor(database, window).handle(
            parse_event({"type": "result-deleted", "result_id": "555"})
        )

        assert outcome.status_code == 200
        assert outcome.written
        assert await ledger_count(database) == 0

    @pytest.mark.asyncio
    async def test_unknown_result_is_noop(self, database, window):
        outcome = await WebhookIngestor(database, window).handle(
            parse_event({"type": "result-deleted", "result_id": 1})
        )

        assert outcome.status_code == 200
        assert not outcome.written
