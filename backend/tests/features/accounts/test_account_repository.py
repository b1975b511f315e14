"""
Tests for AccountRepository.
"""

import pytest

from app.features.accounts import AccountRepository

from conftest import make_account


class TestUpsertByTelegramId:

    @pytest.mark.asyncio
    async def test_creates_once(self, database):
        async with database.session() as db:
            repo = AccountRepository(db)
            first = await repo.upsert_by_telegram_id("100", "rower1", "Rower One")
            second = await repo.upsert_by_telegram_id("100")
            await db.commit()

            assert first.id == second.id
            assert await repo.count() == 1
            assert second.pledge_meters == 0

    @pytest.mark.asyncio
    async def test_refreshes_names_only_when_given(self, database):
        async with database.session() as db:
            repo = AccountRepository(db)
            await repo.upsert_by_telegram_id(100, "old", "Old Name")
            account = await repo.upsert_by_telegram_id(100, None, "New Name")
            await db.commit()

            assert account.telegram_id == "100"
            assert account.username == "old"
            assert account.display_name == "New Name"


class TestPledge:

    @pytest.mark.asyncio
    async def test_set_pledge(self, database):
        async with database.session() as db:
            repo = AccountRepository(db)
            account = await repo.upsert_by_telegram_id("100")
            account = await repo.set_pledge(account, 50000)
            await db.commit()
            assert account.pledge_meters == 50000

    @pytest.mark.asyncio
    async def test_negative_pledge_rejected(self, database):
        async with database.session() as db:
            repo = AccountRepository(db)
            account = await repo.upsert_by_telegram_id("100")
            with pytest.raises(ValueError):
                await repo.set_pledge(account, -1)


class TestCredentials:

    @pytest.mark.asyncio
    async def test_list_with_tokens_skips_unconnected(self, database):
        connected = await make_account(database, "1", access_token="a1")
        await make_account(database, "2")
        other = await make_account(database, "3", access_token="a3")

        async with database.session() as db:
            accounts = await AccountRepository(db).list_with_tokens()

        assert [a.id for a in accounts] == [connected.id, other.id]

    @pytest.mark.asyncio
    async def test_reverse_lookup_by_concept2_id(self, database):
        account = await make_account(database, "1", concept2_user_id="777", access_token="a")

        async with database.session() as db:
            repo = AccountRepository(db)
            found = await repo.get_by_concept2_id(777)
            missing = await repo.get_by_concept2_id("778")

        assert found.id == account.id
        assert missing is None

    @pytest.mark.asyncio
    async def test_reconnect_from_other_chat_moves_binding(self, database):
        old = await make_account(database, "1", concept2_user_id="777", access_token="a")
        new = await make_account(database, "2", concept2_user_id="777", access_token="b")

        async with database.session() as db:
            repo = AccountRepository(db)
            assert (await repo.get_by_concept2_id("777")).id == new.id
            old = await repo.get_by_id(old.id)
            assert old.access_token is None
            assert old.concept2_user_id is None


class TestSwapTokens:

    @pytest.mark.asyncio
    async def test_swaps_when_refresh_token_matches(self, database):
        account = await make_account(database, "1", access_token="a1", refresh_token="r1")

        async with database.session() as db:
            swapped = await AccountRepository(db).swap_tokens(account.id, "r1", "a2", "r2")
            await db.commit()

        async with database.session() as db:
            stored = await AccountRepository(db).get_by_id(account.id)

        assert swapped is True
        assert (stored.access_token, stored.refresh_token) == ("a2", "r2")

    @pytest.mark.asyncio
    async def test_no_swap_when_refresh_token_changed(self, database):
        account = await make_account(database, "1", access_token="a1", refresh_token="r1")

        async with database.session() as db:
            swapped = await AccountRepository(db).swap_tokens(account.id, "stale", "a2", "r2")
            await db.commit()

        async with database.session() as db:
            stored = await AccountRepository(db).get_by_id(account.id)

        assert swapped is False
        assert (stored.access_token, stored.refresh_token) == ("a1", "r1")
