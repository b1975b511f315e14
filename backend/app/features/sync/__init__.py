"""
Batch sync feature.

Periodic and on-demand pull of Concept2 results into the activity ledger.
"""

from .background import BackgroundSyncRunner
from .config import SyncConfig
from .scheduler import BatchSyncScheduler

__all__ = [
    "BackgroundSyncRunner",
    "BatchSyncScheduler",
    "SyncConfig",
]
