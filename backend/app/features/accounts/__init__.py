"""
Account management module.

Usage:
    from app.features.accounts import Account, AccountRepository

Models:
- Account: participant with chat identity, pledge and Concept2 credentials

Repositories:
- AccountRepository: Data access for accounts
"""

from .models import Account
from .schemas import PledgeRequest, AccountResponse
from .repository import AccountRepository

__all__ = [
    # Models
    "Account",
    # Schemas
    "PledgeRequest",
    "AccountResponse",
    # Repositories
    "AccountRepository",
]
