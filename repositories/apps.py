"""
App Repository

Read operations behind the catalog listing, detail, popular, recent and
search endpoints.
"""
from typing import Optional, List

from sqlalchemy import select, desc, func

from database.models import AIApp, Review
from .base import BaseRepository
from .query_builder import (
    AppListFilters,
    build_app_list_query,
    build_search_query,
    eligible_conditions,
    rating_summary_subquery,
)


def category_to_dict(category) -> Optional[dict]:
    """Compact category payload used in listings and rankings."""
    if category is None:
        return None
    return {
        "id": category.id,
        "name": category.name,
        "type": category.type,
        "color": category.color,
    }


def app_to_dict(app: AIApp, avg_rating=None, review_count: int = 0) -> dict:
    """
    Serialize an app row with its rating summary.

    avg_rating stays None for apps without reviews.
    """
    data = app.to_dict()
    data["avg_rating"] = round(float(avg_rating), 2) if avg_rating is not None else None
    data["review_count"] = int(review_count or 0)
    data["category"] = category_to_dict(app.category)
    data["tags"] = [{"id": tag.id, "name": tag.name, "color": tag.color} for tag in app.tags]
    return data


class AppRepository(BaseRepository[AIApp]):
    """Repository for catalog app queries."""

    model = AIApp

    @staticmethod
    def _select_with_ratings():
        """select(AIApp, avg_rating, review_count) with the review summary joined."""
        ratings = rating_summary_subquery()
        stmt = (
            select(
                AIApp,
                ratings.c.avg_rating,
                func.coalesce(ratings.c.review_count, 0),
            )
            .outerjoin(ratings, ratings.c.app_id == AIApp.id)
        )
        return stmt, ratings

    # ============================================
    # LISTING
    # ============================================

    async def list_apps(self, filters: AppListFilters) -> tuple[List[dict], int, int, int]:
        """
        Filtered, sorted, paginated app listing.

        Returns:
            (apps, total matching the filters, effective page, effective limit)
        """
        query = build_app_list_query(filters)

        result = await self.session.execute(query.rows)
        apps = [app_to_dict(app, avg, count) for app, avg, count in result.all()]

        total = (await self.session.execute(query.count)).scalar_one()

        return apps, total, query.page, query.limit

    async def get_popular(self, limit: int = 10) -> List[dict]:
        """Public active apps by usage, then rating (unrated last)."""
        stmt, ratings = self._select_with_ratings()
        stmt = (
            stmt
            .where(*eligible_conditions())
            .order_by(
                desc(AIApp.usage_count),
                ratings.c.avg_rating.is_(None),
                desc(ratings.c.avg_rating),
                AIApp.id,
            )
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [app_to_dict(app, avg, count) for app, avg, count in result.all()]

    async def get_recent(self, limit: int = 10) -> List[dict]:
        """Newest public active apps."""
        stmt, ratings = self._select_with_ratings()
        stmt = (
            stmt
            .where(*eligible_conditions())
            .order_by(desc(AIApp.created_at), desc(AIApp.id))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [app_to_dict(app, avg, count) for app, avg, count in result.all()]

    async def search(self, term: str, limit: int = 20) -> List[dict]:
        """Free-text search over public active apps."""
        result = await self.session.execute(build_search_query(term, limit))
        return [app_to_dict(app, avg, count) for app, avg, count in result.all()]

    # ============================================
    # DETAIL
    # ============================================

    async def get_with_details(self, app_id: int, review_limit: int = 5) -> Optional[dict]:
        """App with rating summary, tags and its latest reviews."""
        stmt, _ = self._select_with_ratings()
        stmt = stmt.where(AIApp.id == app_id)
        row = (await self.session.execute(stmt)).first()
        if row is None:
            return None

        app, avg, count = row
        data = app_to_dict(app, avg, count)
        reviews = await self.get_reviews(app_id, review_limit)
        data["reviews"] = [review.to_dict(exclude={"app_id"}) for review in reviews]
        return data

    async def get_reviews(self, app_id: int, limit: int = 10) -> List[Review]:
        """Latest reviews for an app."""
        stmt = (
            select(Review)
            .where(Review.app_id == app_id)
            .order_by(desc(Review.created_at), desc(Review.id))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
