"""
Configuration and utilities for app ranking.

Contains:
- Combined score weights (tunable policy)
- Eligibility thresholds
- Limit bounds and clamping
- Monthly / weekly window boundaries
"""
from datetime import datetime, timedelta
from typing import Any, Optional

from utils.exceptions import InvalidArgumentError


# ============================================
# COMBINED SCORE WEIGHTS
# ============================================
#
# combined = RATING_WEIGHT * (avg_rating / MAX_RATING)
#          + USAGE_WEIGHT  * (usage_count / max usage_count in the eligible set)
#
# Both components are in [0, 1] and the weights sum to 1.0, so the score is
# in [0, 1]. Shift weight towards USAGE_WEIGHT to favour adoption over
# satisfaction.

RATING_WEIGHT = 0.4
USAGE_WEIGHT = 0.6

MAX_RATING = 5.0


# ============================================
# ELIGIBILITY
# ============================================

MIN_REVIEWS_FOR_RATING = 3    # rating ranking only; usage rankings ignore it


# ============================================
# LIMITS
# ============================================

DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50

SCORE_PRECISION = 4           # decimals kept on ranking_score


# ============================================
# UTILITY FUNCTIONS
# ============================================

def clamp_limit(limit: Any = None) -> int:
    """
    Resolve a requested limit into [MIN_LIMIT, MAX_LIMIT].

    Args:
        limit: Requested number of items; None means DEFAULT_LIMIT

    Returns:
        Clamped limit

    Raises:
        InvalidArgumentError: limit is not an integer
    """
    if limit is None:
        return DEFAULT_LIMIT
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgumentError(
            f"Invalid limit '{limit}'. Must be an integer between {MIN_LIMIT} and {MAX_LIMIT}",
            field="limit",
        )
    return max(MIN_LIMIT, min(limit, MAX_LIMIT))


def normalize_rating(avg_rating: Optional[float]) -> float:
    """Rating component in [0, 1]; 0 for unrated apps."""
    if avg_rating is None:
        return 0.0
    return min(max(avg_rating / MAX_RATING, 0.0), 1.0)


def normalize_usage(usage_count: int, max_usage_count: int) -> float:
    """Usage component in [0, 1]; 0 when nobody has used any eligible app."""
    if max_usage_count <= 0:
        return 0.0
    return min(max(usage_count / max_usage_count, 0.0), 1.0)


def calculate_combined_score(
    avg_rating: Optional[float],
    usage_count: int,
    max_usage_count: int,
) -> float:
    """
    Weighted blend of normalized rating and normalized usage.

    Args:
        avg_rating: Average review score, None when unrated
        usage_count: Cumulative usage of this app
        max_usage_count: Highest usage_count in the eligible set

    Returns:
        Unrounded score between 0.0 and 1.0; round with SCORE_PRECISION
        only for display, never before sorting
    """
    return (
        RATING_WEIGHT * normalize_rating(avg_rating)
        + USAGE_WEIGHT * normalize_usage(usage_count, max_usage_count)
    )


def month_window_start(now: datetime) -> datetime:
    """First instant of the calendar month containing `now`."""
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def week_window_start(now: datetime) -> datetime:
    """Monday 00:00 of the ISO week containing `now`."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=midnight.weekday())
