"""
Concept2 OAuth flow.

Handles:
- Authorization URL generation
- Code exchange for tokens
- Token refresh

Concept2 refresh tokens are single-use: every successful refresh returns
a new pair and invalidates the old refresh token.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from .client import Concept2Error

logger = logging.getLogger(__name__)


DEFAULT_SCOPE = "user:read,results:read"


class Concept2OAuthError(Concept2Error):
    """OAuth-related error (rejected grant, provider unreachable)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class Concept2OAuth:
    """
    Concept2 OAuth handler.

    Usage:
        oauth = Concept2OAuth(client_id, client_secret, redirect_uri)
        auth_url = oauth.get_authorization_url(state="...")
        tokens = await oauth.exchange_code(code)
        tokens = await oauth.refresh_token(refresh_token)
    """

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: Optional[str] = None,
        base_url: str = "https://log.concept2.com",
        timeout: float = 15.0,
        scope: str = DEFAULT_SCOPE,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.scope = scope
        self._http_client = http_client

    @property
    def authorize_url(self) -> str:
        return f"{self.base_url}/oauth/authorize"

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/oauth/access_token"

    def get_authorization_url(self, state: str) -> str:
        """
        Generate Concept2 OAuth authorization URL.

        Args:
            state: CSRF state echoed back to the callback

        Returns:
            Authorization URL string
        """
        params = {
            "client_id": self.client_id,
            "scope": self.scope,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "state": state,
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> dict:
        """
        Exchange authorization code for tokens.

        Args:
            code: Authorization code from the callback

        Returns:
            {"access_token": "...", "refresh_token": "...", ...}

        Raises:
            Concept2OAuthError: If token exchange fails
        """
        return await self._token_request({
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "authorization_code",
            "scope": self.scope,
            "code": code,
            "redirect_uri": self.redirect_uri,
        })

    async def refresh_token(self, refresh_token: str) -> dict:
        """
        Exchange a refresh token for a new token pair.

        Args:
            refresh_token: Current (single-use) refresh token

        Returns:
            {"access_token": "...", "refresh_token": "...", ...}

        Raises:
            Concept2OAuthError: If the grant is rejected or the call fails
        """
        return await self._token_request({
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "refresh_token",
            "scope": self.scope,
            "refresh_token": refresh_token,
        })

    async def _token_request(self, data: dict) -> dict:
        grant = data["grant_type"]
        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    self.token_url, data=data, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.token_url, data=data)
        except httpx.TimeoutException as e:
            raise Concept2OAuthError(f"Token request ({grant}) timed out") from e
        except httpx.HTTPError as e:
            raise Concept2OAuthError(f"Token request ({grant}) failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Concept2 {grant} failed: {response.status_code} {response.text}")
            raise Concept2OAuthError(
                f"Token request ({grant}) failed: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise Concept2OAuthError(f"Token response ({grant}) is not JSON") from e

        if not payload.get("access_token") or not payload.get("refresh_token"):
            raise Concept2OAuthError(f"Token response ({grant}) is missing tokens")

        return payload
