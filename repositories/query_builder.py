"""
Query Builder

Turns a structured listing request into SQLAlchemy statements. Every user
value ends up as a bound parameter; sort columns come from an allow-list
mapping, never from request text.

Usage:
    query = build_app_list_query(AppListFilters(q="chat", tags=[1, 2], page=2))
    rows = (await session.execute(query.rows)).all()
    total = (await session.execute(query.count)).scalar_one()
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from sqlalchemy import Select, select, func, or_
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import Subquery

from constants import AppStatus, SortField, SortOrder, SORT_FIELDS, APP_STATUSES
from database.models import AIApp, Review, app_tags
from utils.exceptions import InvalidArgumentError


# ============================================
# PAGINATION LIMITS
# ============================================

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

LIKE_ESCAPE = "\\"


@dataclass
class AppListFilters:
    """Filter / sort / page request for the app listing."""
    q: Optional[str] = None
    category_id: Optional[int] = None
    status: Optional[str] = None
    is_public: Optional[bool] = None
    creator_id: Optional[int] = None
    tags: List[int] = field(default_factory=list)  # ANY of these tags
    sort_by: str = SortField.CREATED_AT.value
    order: str = SortOrder.DESC.value
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE


@dataclass
class AppListQuery:
    """Row and count statements sharing one predicate."""
    rows: Select
    count: Select
    page: int
    limit: int
    offset: int


# ============================================
# SHARED FRAGMENTS
# ============================================

def eligible_conditions() -> List[ColumnElement[bool]]:
    """Predicate for apps that may appear in rankings: public and active."""
    return [
        AIApp.is_public.is_(True),
        AIApp.status == AppStatus.ACTIVE.value,
    ]


def rating_summary_subquery() -> Subquery:
    """Per-app avg_rating and review_count aggregated from reviews."""
    return (
        select(
            Review.app_id.label("app_id"),
            func.avg(Review.rating).label("avg_rating"),
            func.count(Review.id).label("review_count"),
        )
        .group_by(Review.app_id)
        .subquery("rating_summary")
    )


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def text_match(term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on name or description."""
    pattern = f"%{escape_like(term)}%"
    return or_(
        AIApp.name.ilike(pattern, escape=LIKE_ESCAPE),
        AIApp.description.ilike(pattern, escape=LIKE_ESCAPE),
    )


# ============================================
# VALIDATION
# ============================================

def resolve_sort_field(value: Any) -> SortField:
    """Map a request value onto the sort allow-list."""
    if isinstance(value, SortField):
        return value
    if value not in SORT_FIELDS:
        raise InvalidArgumentError(
            f"Invalid sort_by '{value}'. Must be one of: {', '.join(SORT_FIELDS)}",
            field="sort_by",
        )
    return SortField(value)


def resolve_sort_order(value: Any) -> SortOrder:
    if isinstance(value, SortOrder):
        return value
    normalized = str(value).lower() if value is not None else ""
    if normalized not in (SortOrder.ASC.value, SortOrder.DESC.value):
        raise InvalidArgumentError(
            f"Invalid order '{value}'. Must be 'asc' or 'desc'",
            field="order",
        )
    return SortOrder(normalized)


def resolve_status(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, AppStatus):
        return value.value
    if value not in APP_STATUSES:
        raise InvalidArgumentError(
            f"Invalid status '{value}'. Must be one of: {', '.join(APP_STATUSES)}",
            field="status",
        )
    return value


def resolve_page(page: Any, limit: Any, max_limit: int = MAX_PAGE_SIZE) -> tuple[int, int, int]:
    """
    Validate pagination and compute the offset.

    Args:
        page: 1-based page number
        limit: Page size; values above max_limit are capped
        max_limit: Upper bound for the page size

    Returns:
        (page, limit, offset)
    """
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise InvalidArgumentError("page must be a positive integer", field="page")
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidArgumentError("limit must be a positive integer", field="limit")

    limit = min(limit, max_limit)
    return page, limit, (page - 1) * limit


# ============================================
# BUILDERS
# ============================================

def build_filter_conditions(filters: AppListFilters) -> List[ColumnElement[bool]]:
    """Translate filters into a list of AND-ed conditions on ai_apps."""
    conditions = []

    if filters.q and filters.q.strip():
        conditions.append(text_match(filters.q.strip()))

    if filters.category_id is not None:
        conditions.append(AIApp.category_id == filters.category_id)

    status = resolve_status(filters.status)
    if status is not None:
        conditions.append(AIApp.status == status)

    if filters.is_public is not None:
        conditions.append(AIApp.is_public.is_(filters.is_public))

    if filters.creator_id is not None:
        conditions.append(AIApp.creator_id == filters.creator_id)

    if filters.tags:
        # Semi-join: one row per app even when several tags match
        tagged = select(app_tags.c.app_id).where(app_tags.c.tag_id.in_(filters.tags))
        conditions.append(AIApp.id.in_(tagged))

    return conditions


def build_order_by(sort_field: SortField, order: SortOrder, ratings: Subquery) -> list:
    """ORDER BY clauses for the listing, with id as the final tie-break."""
    columns = {
        SortField.NAME: AIApp.name,
        SortField.CREATED_AT: AIApp.created_at,
        SortField.UPDATED_AT: AIApp.updated_at,
        SortField.USAGE_COUNT: AIApp.usage_count,
        SortField.AVG_RATING: ratings.c.avg_rating,
    }
    column = columns[sort_field]

    clauses = []
    if sort_field == SortField.AVG_RATING:
        # Unrated apps last in both directions
        clauses.append(ratings.c.avg_rating.is_(None))
    clauses.append(column.asc() if order == SortOrder.ASC else column.desc())
    clauses.append(AIApp.id.asc())
    return clauses


def build_app_list_query(filters: AppListFilters, max_page_size: int = MAX_PAGE_SIZE) -> AppListQuery:
    """
    Build the listing statements for a filter request.

    Raises:
        InvalidArgumentError: sort field, order, status or pagination is invalid
    """
    sort_field = resolve_sort_field(filters.sort_by)
    order = resolve_sort_order(filters.order)
    page, limit, offset = resolve_page(filters.page, filters.limit, max_page_size)
    conditions = build_filter_conditions(filters)

    ratings = rating_summary_subquery()
    rows = (
        select(
            AIApp,
            ratings.c.avg_rating,
            func.coalesce(ratings.c.review_count, 0).label("review_count"),
        )
        .outerjoin(ratings, ratings.c.app_id == AIApp.id)
        .where(*conditions)
        .order_by(*build_order_by(sort_field, order, ratings))
        .limit(limit)
        .offset(offset)
    )

    count = select(func.count()).select_from(AIApp).where(*conditions)

    return AppListQuery(rows=rows, count=count, page=page, limit=limit, offset=offset)


def build_search_query(term: str, limit: int) -> Select:
    """Public, active apps matching a free-text term, most used first."""
    ratings = rating_summary_subquery()
    return (
        select(
            AIApp,
            ratings.c.avg_rating,
            func.coalesce(ratings.c.review_count, 0).label("review_count"),
        )
        .outerjoin(ratings, ratings.c.app_id == AIApp.id)
        .where(text_match(term), *eligible_conditions())
        .order_by(AIApp.usage_count.desc(), AIApp.id.asc())
        .limit(limit)
    )
