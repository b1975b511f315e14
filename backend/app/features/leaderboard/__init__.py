"""
Leaderboard module.

Usage:
    from app.features.leaderboard import LeaderboardAggregator
"""

from .aggregator import LeaderboardAggregator
from .schemas import Leaderboard, LeaderboardEntry

__all__ = ["LeaderboardAggregator", "Leaderboard", "LeaderboardEntry"]
