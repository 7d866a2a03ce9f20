"""
Ranker Module - App Rankings

Scores and orders aggregated app statistics.

Components:
- Ranker: Ranking policies (rating, usage, combined, monthly, weekly)
- AppStats / RankingResult / RankingSnapshot: Data classes
- Weights, thresholds, limit clamping and window utilities
"""

from .models import AppStats, CategoryRef, RankingResult, RankingSnapshot
from .config import (
    RATING_WEIGHT,
    USAGE_WEIGHT,
    MAX_RATING,
    MIN_REVIEWS_FOR_RATING,
    DEFAULT_LIMIT,
    MIN_LIMIT,
    MAX_LIMIT,
    clamp_limit,
    normalize_rating,
    normalize_usage,
    calculate_combined_score,
    month_window_start,
    week_window_start,
)
from .ranker import Ranker, resolve_ranking_type, is_rankable


__all__ = [
    # Main classes
    "Ranker",
    # Models
    "AppStats",
    "CategoryRef",
    "RankingResult",
    "RankingSnapshot",
    # Config
    "RATING_WEIGHT",
    "USAGE_WEIGHT",
    "MAX_RATING",
    "MIN_REVIEWS_FOR_RATING",
    "DEFAULT_LIMIT",
    "MIN_LIMIT",
    "MAX_LIMIT",
    # Utilities
    "clamp_limit",
    "normalize_rating",
    "normalize_usage",
    "calculate_combined_score",
    "month_window_start",
    "week_window_start",
    "resolve_ranking_type",
    "is_rankable",
]
