"""
Processor package for the AI App Catalog.

- Ranker: Orders aggregated app statistics (rating, usage, combined, monthly, weekly)
- RankingService: Reads statistics from storage, serves and refreshes rankings

Main entry point: RankingService class
"""

from .ranker import (
    Ranker,
    AppStats,
    CategoryRef,
    RankingResult,
    RankingSnapshot,
    calculate_combined_score,
    clamp_limit,
    resolve_ranking_type,
)
from .ranking_service import RankingService

__all__ = [
    # Service
    "RankingService",
    # Ranker
    "Ranker",
    "AppStats",
    "CategoryRef",
    "RankingResult",
    "RankingSnapshot",
    # Utilities
    "calculate_combined_score",
    "clamp_limit",
    "resolve_ranking_type",
]
