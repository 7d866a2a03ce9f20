"""
Ranking Service - Ranking queries and refresh

Flow:
1. Read aggregated statistics for eligible apps (one query, bounded wait)
2. Hand them to the Ranker for the requested type
3. Optionally serve from / refresh the materialized RankingSnapshot
"""
import asyncio
from datetime import datetime
from typing import Any, List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from config import settings
from constants import RankingType
from database import Database
from repositories import AppStatsRepository
from utils.exceptions import StorageTimeoutError, UnavailableError
from .ranker import (
    AppStats,
    Ranker,
    RankingResult,
    RankingSnapshot,
    MAX_LIMIT,
    clamp_limit,
    month_window_start,
    resolve_ranking_type,
    week_window_start,
)


class RankingService:
    """
    Ranking queries over the catalog.

    Stateless apart from the current snapshot reference, which is replaced
    wholesale by refresh_rankings() and never mutated.
    """

    def __init__(
        self,
        database: Database,
        ranker: Ranker = None,
        query_timeout: float = None,
        snapshot_ttl: float = None,
    ):
        self.database = database
        self.ranker = ranker or Ranker()
        self.query_timeout = (
            settings.RANKING_QUERY_TIMEOUT_SECONDS if query_timeout is None else query_timeout
        )
        self.snapshot_ttl = (
            settings.RANKING_SNAPSHOT_TTL_SECONDS if snapshot_ttl is None else snapshot_ttl
        )

        self._snapshot: Optional[RankingSnapshot] = None
        self._generation = 0

    @property
    def snapshot(self) -> Optional[RankingSnapshot]:
        return self._snapshot

    # ============================================
    # QUERIES
    # ============================================

    async def get_ranking(self, ranking_type: Any, limit: Any = None) -> List[RankingResult]:
        """
        Ranked apps for one ranking type.

        Args:
            ranking_type: RankingType or one of its string values
            limit: Max items (default 10, clamped to 1..50)

        Returns:
            RankingResult list with dense ranks starting at 1

        Raises:
            InvalidArgumentError: unknown type or non-integer limit
            UnavailableError: storage failed
            StorageTimeoutError: storage did not answer in time
        """
        ranking_type = resolve_ranking_type(ranking_type)
        limit = clamp_limit(limit)

        now = datetime.now()
        snapshot = self._fresh_snapshot(now)
        if snapshot is not None:
            results = snapshot.get(ranking_type, limit)
            logger.debug(
                f"Ranking {ranking_type.value} (limit={limit}) served from snapshot "
                f"generation {snapshot.generation}: {len(results)} items"
            )
            return results

        stats = await self._fetch_stats(now)
        results = self.ranker.rank(stats, ranking_type, limit)
        logger.debug(f"Ranking {ranking_type.value} (limit={limit}): {len(results)} items")
        return results

    async def get_ranking_by_rating(self, limit: Any = None) -> List[RankingResult]:
        return await self.get_ranking(RankingType.RATING, limit)

    async def get_ranking_by_usage(self, limit: Any = None) -> List[RankingResult]:
        return await self.get_ranking(RankingType.USAGE, limit)

    async def get_ranking_combined(self, limit: Any = None) -> List[RankingResult]:
        return await self.get_ranking(RankingType.COMBINED, limit)

    async def get_ranking_monthly(self, limit: Any = None) -> List[RankingResult]:
        return await self.get_ranking(RankingType.MONTHLY, limit)

    async def get_ranking_weekly(self, limit: Any = None) -> List[RankingResult]:
        return await self.get_ranking(RankingType.WEEKLY, limit)

    # ============================================
    # REFRESH
    # ============================================

    async def refresh_rankings(self) -> RankingSnapshot:
        """
        Recompute every ranking type and swap in a new snapshot.

        When refreshes overlap, the one started last wins; an older refresh
        finishing late returns its snapshot without installing it.

        Raises:
            UnavailableError / StorageTimeoutError: the previous snapshot is kept
        """
        self._generation += 1
        generation = self._generation

        now = datetime.now()
        logger.info(f"Refreshing rankings (generation {generation})...")

        stats = await self._fetch_stats(now)
        snapshot = RankingSnapshot(
            computed_at=now,
            rankings=self.ranker.rank_all(stats, MAX_LIMIT),
            generation=generation,
        )

        if self._snapshot is None or generation > self._snapshot.generation:
            self._snapshot = snapshot
            logger.info(f"Rankings refreshed: {snapshot.summary()['counts']}")
        else:
            logger.info(
                f"Discarding refresh generation {generation}; "
                f"generation {self._snapshot.generation} is newer"
            )
        return snapshot

    def _fresh_snapshot(self, now: datetime) -> Optional[RankingSnapshot]:
        snapshot = self._snapshot
        if snapshot is None or self.snapshot_ttl <= 0:
            return None
        if snapshot.age_seconds(now) > self.snapshot_ttl:
            return None
        # monthly / weekly counts restart at a window boundary
        computed_at = snapshot.computed_at
        if month_window_start(now) != month_window_start(computed_at):
            return None
        if week_window_start(now) != week_window_start(computed_at):
            return None
        return snapshot

    # ============================================
    # STORAGE
    # ============================================

    async def _fetch_stats(self, now: datetime) -> List[AppStats]:
        """Aggregated statistics for eligible apps, bounded by query_timeout."""
        month_start = month_window_start(now)
        week_start = week_window_start(now)

        try:
            rows = await asyncio.wait_for(
                self._load_rows(month_start, week_start),
                timeout=self.query_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Ranking statistics query exceeded {self.query_timeout}s")
            raise StorageTimeoutError(
                "Ranking data is temporarily unavailable",
                details={"timeout_seconds": self.query_timeout},
            )
        except SQLAlchemyError as e:
            logger.exception(f"Ranking statistics query failed: {e}")
            raise UnavailableError("Ranking data is temporarily unavailable") from e

        return [AppStats.from_row(row) for row in rows]

    async def _load_rows(self, month_start: datetime, week_start: datetime) -> List[dict]:
        async with self.database.session() as session:
            repo = AppStatsRepository(session)
            return await repo.get_eligible_stats(month_start, week_start)
