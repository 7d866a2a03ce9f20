"""
Ranker - App Ranking

Orders aggregated app statistics for one of five ranking policies and
assigns dense 1-based ranks. Pure computation: no I/O, no shared state.
"""
from typing import Any, Callable, Dict, Iterable, List

from loguru import logger

from constants import AppStatus, RankingType, RANKING_TYPES
from utils.exceptions import InvalidArgumentError
from .models import AppStats, RankingResult
from .config import (
    MAX_LIMIT,
    MIN_REVIEWS_FOR_RATING,
    SCORE_PRECISION,
    calculate_combined_score,
    clamp_limit,
)


def resolve_ranking_type(value: Any) -> RankingType:
    """
    Parse a ranking type.

    Raises:
        InvalidArgumentError: value is not one of the known types
    """
    if isinstance(value, RankingType):
        return value
    if value not in RANKING_TYPES:
        raise InvalidArgumentError(
            f"Invalid ranking type '{value}'. Must be one of: {', '.join(RANKING_TYPES)}",
            field="type",
        )
    return RankingType(value)


def is_rankable(stats: AppStats) -> bool:
    """Public and active apps only."""
    return stats.is_public and stats.status == AppStatus.ACTIVE.value


class Ranker:
    """
    Ranking policies over AppStats.

    | type     | metric (desc)                 | tie-break               |
    |----------|-------------------------------|-------------------------|
    | rating   | avg_rating, >= 3 reviews      | usage_count desc, id    |
    | usage    | usage_count                   | id                      |
    | combined | weighted rating/usage score   | id                      |
    | monthly  | usage this calendar month     | id                      |
    | weekly   | usage this calendar week      | id                      |
    """

    def __init__(self, min_reviews_for_rating: int = MIN_REVIEWS_FOR_RATING):
        """
        Initialize ranker.

        Args:
            min_reviews_for_rating: Reviews required to enter the rating ranking
        """
        self.min_reviews_for_rating = min_reviews_for_rating
        self._policies: Dict[RankingType, Callable[[List[AppStats]], List[RankingResult]]] = {
            RankingType.RATING: self._rank_by_rating,
            RankingType.USAGE: self._rank_by_usage,
            RankingType.COMBINED: self._rank_combined,
            RankingType.MONTHLY: self._rank_monthly,
            RankingType.WEEKLY: self._rank_weekly,
        }

    def rank(
        self,
        stats: Iterable[AppStats],
        ranking_type: Any,
        limit: Any = None,
    ) -> List[RankingResult]:
        """
        Rank apps for one ranking type.

        Args:
            stats: Aggregated statistics (ineligible apps are dropped)
            ranking_type: RankingType or its string value
            limit: Max items; None means the default, out-of-range values are clamped

        Returns:
            Results ordered by rank, ranks 1..N without gaps

        Raises:
            InvalidArgumentError: unknown type or non-integer limit
        """
        ranking_type = resolve_ranking_type(ranking_type)
        limit = clamp_limit(limit)

        eligible = [s for s in stats if is_rankable(s)]
        ranked = self._policies[ranking_type](eligible)

        logger.debug(
            f"Ranked {ranking_type.value}: eligible={len(eligible)}, "
            f"ranked={len(ranked)}, limit={limit}"
        )
        return ranked[:limit]

    def rank_all(self, stats: Iterable[AppStats], limit: int = MAX_LIMIT) -> Dict[RankingType, List[RankingResult]]:
        """Every ranking type computed from the same statistics."""
        stats = list(stats)
        return {ranking_type: self.rank(stats, ranking_type, limit) for ranking_type in RankingType}

    # ============================================
    # POLICIES
    # ============================================

    def _rank_by_rating(self, eligible: List[AppStats]) -> List[RankingResult]:
        rated = [
            s for s in eligible
            if s.avg_rating is not None and s.review_count >= self.min_reviews_for_rating
        ]
        ordered = sorted(rated, key=lambda s: (-s.avg_rating, -s.usage_count, s.id))
        return [
            self._result(s, rank, RankingType.RATING, review_count=s.review_count)
            for rank, s in enumerate(ordered, start=1)
        ]

    def _rank_by_usage(self, eligible: List[AppStats]) -> List[RankingResult]:
        ordered = sorted(eligible, key=lambda s: (-s.usage_count, s.id))
        return [
            self._result(s, rank, RankingType.USAGE)
            for rank, s in enumerate(ordered, start=1)
        ]

    def _rank_combined(self, eligible: List[AppStats]) -> List[RankingResult]:
        max_usage = max((s.usage_count for s in eligible), default=0)
        scored = [
            (calculate_combined_score(s.avg_rating, s.usage_count, max_usage), s)
            for s in eligible
        ]
        scored.sort(key=lambda item: (-item[0], item[1].id))
        return [
            self._result(
                s, rank, RankingType.COMBINED,
                review_count=s.review_count,
                ranking_score=round(score, SCORE_PRECISION),
            )
            for rank, (score, s) in enumerate(scored, start=1)
        ]

    def _rank_monthly(self, eligible: List[AppStats]) -> List[RankingResult]:
        ordered = sorted(eligible, key=lambda s: (-s.monthly_usage, s.id))
        return [
            self._result(s, rank, RankingType.MONTHLY, monthly_usage=s.monthly_usage)
            for rank, s in enumerate(ordered, start=1)
        ]

    def _rank_weekly(self, eligible: List[AppStats]) -> List[RankingResult]:
        ordered = sorted(eligible, key=lambda s: (-s.weekly_usage, s.id))
        return [
            self._result(s, rank, RankingType.WEEKLY, weekly_usage=s.weekly_usage)
            for rank, s in enumerate(ordered, start=1)
        ]

    @staticmethod
    def _result(stats: AppStats, rank: int, ranking_type: RankingType, **metrics) -> RankingResult:
        return RankingResult(
            id=stats.id,
            name=stats.name,
            description=stats.description,
            rank=rank,
            ranking_type=ranking_type,
            avg_rating=stats.avg_rating,
            usage_count=stats.usage_count,
            category=stats.category,
            **metrics,
        )
