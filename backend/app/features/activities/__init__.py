"""
Activity ledger module.

Usage:
    from app.features.activities import Activity, ActivityLedger
"""

from .models import Activity
from .ledger import ActivityLedger

__all__ = ["Activity", "ActivityLedger"]
