"""
Stats Interfaces Layer
======================
"""

from src.stats.interfaces.controllers import stats_router

__all__ = ["stats_router"]
