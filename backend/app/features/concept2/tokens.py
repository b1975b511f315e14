"""
Token lifecycle.

Obtains usable access tokens for accounts, refreshes them when a data
call comes back 401, and installs the first pair after OAuth.

There is no proactive expiry tracking: the caller learns that a token is
stale from a Concept2AuthError and then calls `refresh` once.

Refresh tokens are single-use, so two refreshes of the same account must
not race. Within the process refreshes are serialized per account; across
sessions the new pair is written with a compare-and-swap on the old
refresh token. A failed refresh re-reads the account before giving up, in
case a concurrent refresh already installed a newer pair.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Optional

from app.db.session import Database
from app.features.accounts import Account, AccountRepository
from .client import Concept2Client, Concept2Error
from .oauth import Concept2OAuth, Concept2OAuthError

logger = logging.getLogger(__name__)


class RefreshError(Exception):
    """The account cannot be synced this cycle (refresh rejected or unreachable)."""

    def __init__(self, account_id: int, message: str):
        super().__init__(f"Account {account_id}: {message}")
        self.account_id = account_id


class TokenManager:
    """
    Access-token provider and refresher.

    Usage:
        tokens = TokenManager(database, oauth, client)
        token = await tokens.get_valid_token(account)
        try:
            ...
        except Concept2AuthError:
            token = await tokens.refresh(account, stale_access_token=token)
    """

    def __init__(
        self,
        database: Database,
        oauth: Concept2OAuth,
        client: Optional[Concept2Client] = None,
    ):
        self.database = database
        self.oauth = oauth
        self.client = client
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def get_valid_token(self, account: Account) -> str:
        """
        Current access token of the account.

        Raises:
            RefreshError: If the account has no stored credentials
        """
        if not account.access_token:
            raise RefreshError(account.id, "no access token stored")
        return account.access_token

    async def refresh(
        self,
        account: Account,
        stale_access_token: Optional[str] = None,
    ) -> str:
        """
        Exchange the stored refresh token for a new pair and persist it.

        Args:
            account: Account whose token was rejected
            stale_access_token: The token that got the 401. If the stored
                token already differs, another refresh won and its token
                is returned without calling the provider.

        Returns:
            New (or concurrently installed) access token

        Raises:
            RefreshError: If the provider rejects the refresh token or is
                unreachable and no newer pair was installed meanwhile
        """
        async with self._locks[account.id]:
            current = await self._reload(account.id)
            if current is None or not current.refresh_token:
                raise RefreshError(account.id, "no refresh token stored")

            if stale_access_token is not None and current.access_token != stale_access_token:
                logger.info(f"Token for account {account.id} already refreshed, reusing it")
                self._apply(account, current.access_token, current.refresh_token)
                return current.access_token

            used_refresh_token = current.refresh_token
            try:
                new_tokens = await self.oauth.refresh_token(used_refresh_token)
            except Concept2OAuthError as e:
                latest = await self._reload(account.id)
                if (
                    latest is not None
                    and latest.refresh_token
                    and latest.refresh_token != used_refresh_token
                ):
                    logger.info(
                        f"Refresh for account {account.id} lost a race, "
                        f"using the newer stored token"
                    )
                    self._apply(account, latest.access_token, latest.refresh_token)
                    return latest.access_token
                logger.warning(f"Token refresh failed for account {account.id}: {e}")
                raise RefreshError(account.id, str(e)) from e

            access_token = new_tokens["access_token"]
            refresh_token = new_tokens["refresh_token"]

            async with self.database.session() as db:
                swapped = await AccountRepository(db).swap_tokens(
                    account.id,
                    expected_refresh_token=used_refresh_token,
                    access_token=access_token,
                    refresh_token=refresh_token,
                )
                await db.commit()

            if not swapped:
                # Credentials were replaced meanwhile (e.g. re-authorization)
                latest = await self._reload(account.id)
                if latest is None or not latest.access_token:
                    raise RefreshError(account.id, "credentials removed during refresh")
                logger.info(f"Account {account.id} credentials changed during refresh")
                self._apply(account, latest.access_token, latest.refresh_token)
                return latest.access_token

            logger.info(f"Refreshed token for account {account.id}")
            self._apply(account, access_token, refresh_token)
            return access_token

    async def install_credentials(
        self,
        telegram_id: str | int,
        code: str,
        username: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> Account:
        """
        OAuth callback path: exchange the code, learn the Concept2 user ID,
        and store both tokens and the ID in one commit.

        Raises:
            Concept2OAuthError: If the code exchange fails
            Concept2Error: If the user lookup fails
        """
        if self.client is None:
            raise RuntimeError("TokenManager needs a Concept2Client to install credentials")

        token_data = await self.oauth.exchange_code(code)
        access_token = token_data["access_token"]
        try:
            concept2_user_id = await self.client.get_user_id(access_token)
        except Concept2Error:
            logger.error(f"Could not fetch Concept2 user for telegram_id={telegram_id}")
            raise

        async with self.database.session() as db:
            repo = AccountRepository(db)
            account = await repo.upsert_by_telegram_id(telegram_id, username, display_name)
            account = await repo.install_credentials(
                account,
                access_token=access_token,
                refresh_token=token_data["refresh_token"],
                concept2_user_id=concept2_user_id,
            )
            await db.commit()

        logger.info(
            f"Concept2 connected: telegram_id={telegram_id}, "
            f"concept2_user_id={concept2_user_id}"
        )
        return account

    async def _reload(self, account_id: int) -> Optional[Account]:
        async with self.database.session() as db:
            return await db.get(Account, account_id, populate_existing=True)

    @staticmethod
    def _apply(account: Account, access_token: str, refresh_token: str) -> None:
        account.access_token = access_token
        account.refresh_token = refresh_token
