"""
Concept2 Logbook integration.

Provides:
- Concept2OAuth: authorization URL, code exchange, token refresh
- Concept2Client: results and current-user API calls
- TokenManager: per-account token refresh and credential install
"""

from .oauth import Concept2OAuth, Concept2OAuthError, DEFAULT_SCOPE
from .client import (
    Concept2Client,
    Concept2Error,
    Concept2APIError,
    Concept2AuthError,
)
from .schemas import Concept2Result, parse_result_date
from .tokens import TokenManager, RefreshError

__all__ = [
    # OAuth
    "Concept2OAuth",
    "Concept2OAuthError",
    "DEFAULT_SCOPE",
    # API
    "Concept2Client",
    "Concept2Error",
    "Concept2APIError",
    "Concept2AuthError",
    # Payloads
    "Concept2Result",
    "parse_result_date",
    # Tokens
    "TokenManager",
    "RefreshError",
]
