"""
Tests for TokenManager.

The OAuth provider is an AsyncMock; the account store is a real
in-memory database so the compare-and-swap path is exercised.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.features.accounts import AccountRepository
from app.features.concept2 import (
    Concept2APIError,
    Concept2OAuthError,
    RefreshError,
    TokenManager,
)

from conftest import make_account


def make_oauth(**kwargs) -> MagicMock:
    oauth = MagicMock()
    oauth.refresh_token = AsyncMock(**kwargs)
    oauth.exchange_code = AsyncMock()
    return oauth


async def stored_tokens(database, account_id):
    async with database.session() as db:
        account = await AccountRepository(db).get_by_id(account_id)
        return account.access_token, account.refresh_token


class TestGetValidToken:

    @pytest.mark.asyncio
    async def test_returns_stored_token(self, database):
        account = await make_account(database, "1", access_token="a1", refresh_token="r1")
        tokens = TokenManager(database, make_oauth())
        assert await tokens.get_valid_token(account) == "a1"

    @pytest.mark.asyncio
    async def test_no_token(self, database):
        account = await make_account(database, "1")
        tokens = TokenManager(database, make_oauth())
        with pytest.raises(RefreshError):
            await tokens.get_valid_token(account)


class TestRefresh:

    @pytest.mark.asyncio
    async def test_persists_new_pair(self, database):
        account = await make_account(database, "1", access_token="a1", refresh_token="r1")
        oauth = make_oauth(return_value={"access_token": "a2", "refresh_token": "r2"})

        new_token = await TokenManager(database, oauth).refresh(account, stale_access_token="a1")

        assert new_token == "a2"
        oauth.refresh_token.assert_awaited_once_with("r1")
        assert await stored_tokens(database, account.id) == ("a2", "r2")
        assert (account.access_token, account.refresh_token) == ("a2", "r2")

    @pytest.mark.asyncio
    async def test_already_refreshed_skips_provider(self, database):
        """Stored token differs from the one that got the 401: reuse it."""
        account = await make_account(database, "1", access_token="a2", refresh_token="r2")
        oauth = make_oauth()

        new_token = await TokenManager(database, oauth).refresh(account, stale_access_token="a1")

        assert new_token == "a2"
        oauth.refresh_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejected_refresh_raises(self, database):
        account = await make_account(database, "1", access_token="a1", refresh_token="r1")
        oauth = make_oauth(side_effect=Concept2OAuthError("invalid_grant", status_code=400))

        with pytest.raises(RefreshError):
            await TokenManager(database, oauth).refresh(account, stale_access_token="a1")

        assert await stored_tokens(database, account.id) == ("a1", "r1")

    @pytest.mark.asyncio
    async def test_rejected_refresh_after_concurrent_win(self, database):
        """Provider rejects our (already used) refresh token, but a newer pair was stored."""
        account = await make_account(database, "1", access_token="a1", refresh_token="r1")

        async def lose_race(refresh_token):
            async with database.session() as db:
                await AccountRepository(db).swap_tokens(account.id, "r1", "a9", "r9")
                await db.commit()
            raise Concept2OAuthError("invalid_grant", status_code=400)

        oauth = make_oauth(side_effect=lose_race)

        new_token = await TokenManager(database, oauth).refresh(account, stale_access_token="a1")

        assert new_token == "a9"
        assert await stored_tokens(database, account.id) == ("a9", "r9")

    @pytest.mark.asyncio
    async def test_swap_lost_returns_stored_pair(self, database):
        """Credentials replaced while the provider call was in flight."""
        account = await make_account(database, "1", access_token="a1", refresh_token="r1")

        async def reauthorized_meanwhile(refresh_token):
            async with database.session() as db:
                await AccountRepository(db).swap_tokens(account.id, "r1", "a-new", "r-new")
                await db.commit()
            return {"access_token": "a2", "refresh_token": "r2"}

        oauth = make_oauth(side_effect=reauthorized_meanwhile)

        new_token = await TokenManager(database, oauth).refresh(account, stale_access_token="a1")

        assert new_token == "a-new"
        assert await stored_tokens(database, account.id) == ("a-new", "r-new")

    @pytest.mark.asyncio
    async def test_concurrent_refreshes_call_provider_once(self, database):
        account = await make_account(database, "1", access_token="a1", refresh_token="r1")

        async def slow_refresh(refresh_token):
            await asyncio.sleep(0.01)
            return {"access_token": "a2", "refresh_token": "r2"}

        oauth = make_oauth(side_effect=slow_refresh)
        tokens = TokenManager(database, oauth)

        results = await asyncio.gather(
            tokens.refresh(account, stale_access_token="a1"),
            tokens.refresh(account, stale_access_token="a1"),
            tokens.refresh(account, stale_access_token="a1"),
        )

        assert results == ["a2", "a2", "a2"]
        assert oauth.refresh_token.await_count == 1

    @pytest.mark.asyncio
    async def test_no_refresh_token(self, database):
        account = await make_account(database, "1")
        with pytest.raises(RefreshError):
            await TokenManager(database, make_oauth()).refresh(account)


class TestInstallCredentials:

    @pytest.mark.asyncio
    async def test_binds_account(self, database):
        oauth = make_oauth()
        oauth.exchange_code.return_value = {"access_token": "a1", "refresh_token": "r1"}
        client = MagicMock()
        client.get_user_id = AsyncMock(return_value="777")

        account = await TokenManager(database, oauth, client).install_credentials(
            "100", "code", username="rower", display_name="Rower"
        )

        assert account.concept2_user_id == "777"
        assert account.telegram_id == "100"
        client.get_user_id.assert_awaited_once_with("a1")
        async with database.session() as db:
            stored = await AccountRepository(db).get_by_concept2_id("777")
        assert (stored.access_token, stored.refresh_token) == ("a1", "r1")
        assert stored.display_name == "Rower"

    @pytest.mark.asyncio
    async def test_user_lookup_failure_stores_nothing(self, database):
        oauth = make_oauth()
        oauth.exchange_code.return_value = {"access_token": "a1", "refresh_token": "r1"}
        client = MagicMock()
        client.get_user_id = AsyncMock(side_effect=Concept2APIError("down"))

        with pytest.raises(Concept2APIError):
            await TokenManager(database, oauth, client).install_credentials("100", "code")

        async with database.session() as db:
            assert await AccountRepository(db).get_by_telegram_id("100") is None
