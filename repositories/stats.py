"""
App Statistics Repository

Aggregates reviews and usage logs into one row per rankable app:
avg_rating, review_count, cumulative usage_count and windowed usage.
"""
from datetime import datetime
from typing import List

from sqlalchemy import select, func, case

from database.models import AIApp, Category, UsageLog
from .base import BaseRepository
from .query_builder import eligible_conditions, rating_summary_subquery


class AppStatsRepository(BaseRepository[AIApp]):
    """Read-only aggregation feeding the ranker."""

    model = AIApp

    async def get_eligible_stats(
        self,
        month_start: datetime,
        week_start: datetime,
    ) -> List[dict]:
        """
        Aggregate statistics for every public, active app.

        Args:
            month_start: Start of the monthly usage window (inclusive)
            week_start: Start of the weekly usage window (inclusive)

        Returns:
            One dict per app with id, name, description, is_public, status,
            avg_rating (None when unrated), review_count, usage_count,
            monthly_usage, weekly_usage and category_* columns. Ordered by id.
        """
        ratings = rating_summary_subquery()

        # A week can start in the previous month
        window_floor = min(month_start, week_start)
        usage = (
            select(
                UsageLog.app_id.label("app_id"),
                func.sum(case((UsageLog.created_at >= month_start, 1), else_=0)).label("monthly_usage"),
                func.sum(case((UsageLog.created_at >= week_start, 1), else_=0)).label("weekly_usage"),
            )
            .where(UsageLog.created_at >= window_floor)
            .group_by(UsageLog.app_id)
            .subquery("windowed_usage")
        )

        stmt = (
            select(
                AIApp.id,
                AIApp.name,
                AIApp.description,
                AIApp.is_public,
                AIApp.status,
                AIApp.usage_count,
                ratings.c.avg_rating,
                func.coalesce(ratings.c.review_count, 0).label("review_count"),
                func.coalesce(usage.c.monthly_usage, 0).label("monthly_usage"),
                func.coalesce(usage.c.weekly_usage, 0).label("weekly_usage"),
                Category.id.label("category_id"),
                Category.name.label("category_name"),
                Category.type.label("category_type"),
                Category.color.label("category_color"),
            )
            .outerjoin(ratings, ratings.c.app_id == AIApp.id)
            .outerjoin(usage, usage.c.app_id == AIApp.id)
            .outerjoin(Category, Category.id == AIApp.category_id)
            .where(*eligible_conditions())
            .order_by(AIApp.id)
        )

        result = await self.session.execute(stmt)
        return [dict(row._mapping) for row in result.all()]
