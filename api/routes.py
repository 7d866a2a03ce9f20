"""
API Routes - All endpoint definitions for the AI App Catalog

Endpoints organized by:
- Health Check
- Rankings (by type, refresh)
- Apps (listing, popular, recent, search, detail)
"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from constants import RankingType
from database import Database, get_database, get_session_dependency
from processor import RankingService
from repositories import AppRepository, AppListFilters, DEFAULT_PAGE_SIZE
from utils import logger
from utils.exceptions import InvalidArgumentError, NotFoundError, UnavailableError

router = APIRouter()


def get_ranking_service(request: Request) -> RankingService:
    """FastAPI dependency returning the RankingService attached at startup."""
    return request.app.state.ranking_service


def ranking_response(results) -> dict:
    return {"success": True, "data": [item.to_dict() for item in results]}


def list_response(apps) -> dict:
    return {"success": True, "data": apps}


def parse_tag_ids(tags: Optional[str]) -> list[int]:
    """'1,2,3' -> [1, 2, 3]"""
    if not tags:
        return []
    try:
        return [int(part) for part in tags.split(",") if part.strip()]
    except ValueError:
        raise InvalidArgumentError(f"Invalid tags '{tags}'. Expected comma separated ids", field="tags")


# ============================================================
# Health Check
# ============================================================
@router.get("/health")
async def health_check(database: Database = Depends(get_database)):
    """Health check endpoint."""
    body = {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "database": database.safe_url(),
    }
    try:
        await database.ping()
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        body["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=body)
    return body


# ============================================================
# Rankings
# ============================================================
@router.get("/ranking")
async def get_ranking(
    ranking_type: str = Query(default=RankingType.COMBINED.value, alias="type",
                              description="rating | usage | combined | monthly | weekly"),
    limit: Optional[int] = Query(default=None, description="Number of items (1-50, default 10)"),
    service: RankingService = Depends(get_ranking_service),
):
    """Ranked apps for any ranking type."""
    return ranking_response(await service.get_ranking(ranking_type, limit))


@router.get("/ranking/rating")
async def get_ranking_by_rating(
    limit: Optional[int] = None,
    service: RankingService = Depends(get_ranking_service),
):
    """Apps by average rating (3+ reviews)."""
    return ranking_response(await service.get_ranking_by_rating(limit))


@router.get("/ranking/usage")
async def get_ranking_by_usage(
    limit: Optional[int] = None,
    service: RankingService = Depends(get_ranking_service),
):
    """Apps by cumulative usage."""
    return ranking_response(await service.get_ranking_by_usage(limit))


@router.get("/ranking/combined")
async def get_ranking_combined(
    limit: Optional[int] = None,
    service: RankingService = Depends(get_ranking_service),
):
    """Apps by weighted rating and usage."""
    return ranking_response(await service.get_ranking_combined(limit))


@router.get("/ranking/monthly")
async def get_ranking_monthly(
    limit: Optional[int] = None,
    service: RankingService = Depends(get_ranking_service),
):
    """Apps by usage in the current calendar month."""
    return ranking_response(await service.get_ranking_monthly(limit))


@router.get("/ranking/weekly")
async def get_ranking_weekly(
    limit: Optional[int] = None,
    service: RankingService = Depends(get_ranking_service),
):
    """Apps by usage in the current week."""
    return ranking_response(await service.get_ranking_weekly(limit))


@router.post("/ranking/update")
async def update_rankings(service: RankingService = Depends(get_ranking_service)):
    """Recompute and store every ranking."""
    await service.refresh_rankings()
    return {"success": True, "message": "Rankings updated successfully"}


# ============================================================
# Apps
# ============================================================
@router.get("/apps")
async def list_apps(
    q: Optional[str] = Query(default=None, description="Text search on name and description"),
    category_id: Optional[int] = None,
    status: Optional[str] = None,
    is_public: Optional[bool] = None,
    creator_id: Optional[int] = None,
    tags: Optional[str] = Query(default=None, description="Comma separated tag ids (any match)"),
    sort_by: str = "created_at",
    order: str = "desc",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    session: AsyncSession = Depends(get_session_dependency),
):
    """
    List apps with filters, sorting and pagination.

    Page size above 100 is capped.
    """
    filters = AppListFilters(
        q=q,
        category_id=category_id,
        status=status,
        is_public=is_public,
        creator_id=creator_id,
        tags=parse_tag_ids(tags),
        sort_by=sort_by,
        order=order,
        page=page,
        limit=limit,
    )
    try:
        apps, total, page, limit = await AppRepository(session).list_apps(filters)
    except SQLAlchemyError as e:
        logger.exception(f"App listing failed: {e}")
        raise UnavailableError("App listing is temporarily unavailable") from e

    return {
        "success": True,
        "data": apps,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": (total + limit - 1) // limit,
        },
    }


@router.get("/apps/popular")
async def get_popular_apps(
    limit: int = Query(default=10, ge=1, le=50),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Most used public apps."""
    try:
        apps = await AppRepository(session).get_popular(limit)
    except SQLAlchemyError as e:
        logger.exception(f"Popular apps query failed: {e}")
        raise UnavailableError("Popular apps are temporarily unavailable") from e
    return list_response(apps)


@router.get("/apps/recent")
async def get_recent_apps(
    limit: int = Query(default=10, ge=1, le=50),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Newest public apps."""
    try:
        apps = await AppRepository(session).get_recent(limit)
    except SQLAlchemyError as e:
        logger.exception(f"Recent apps query failed: {e}")
        raise UnavailableError("Recent apps are temporarily unavailable") from e
    return list_response(apps)


@router.get("/apps/search")
async def search_apps(
    q: str = Query(..., min_length=1, description="Search term"),
    limit: int = Query(default=20, ge=1, le=100),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Search public apps by name or description."""
    term = q.strip()
    if not term:
        raise InvalidArgumentError("Search term must not be empty", field="q")
    try:
        apps = await AppRepository(session).search(term, limit)
    except SQLAlchemyError as e:
        logger.exception(f"App search failed: {e}")
        raise UnavailableError("App search is temporarily unavailable") from e
    return list_response(apps)


@router.get("/apps/{app_id}")
async def get_app(
    app_id: int,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Single app with tags and its latest reviews."""
    try:
        app = await AppRepository(session).get_with_details(app_id)
    except SQLAlchemyError as e:
        logger.exception(f"App {app_id} lookup failed: {e}")
        raise UnavailableError("App details are temporarily unavailable") from e

    if app is None:
        raise NotFoundError(f"App {app_id} not found")
    return {"success": True, "data": app}
