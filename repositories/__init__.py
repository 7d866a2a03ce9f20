"""
SQLAlchemy-based Repositories

This package provides async repository pattern using SQLAlchemy ORM.

Usage:
    from repositories import AppRepository
    from database import Database

    async with database.session() as session:
        repo = AppRepository(session)
        apps, total, page, limit = await repo.list_apps(AppListFilters(q="chat"))
"""

from .base import BaseRepository
from .apps import AppRepository, app_to_dict, category_to_dict
from .stats import AppStatsRepository
from .query_builder import (
    AppListFilters,
    AppListQuery,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    build_app_list_query,
    build_search_query,
    eligible_conditions,
)

__all__ = [
    "BaseRepository",
    "AppRepository",
    "AppStatsRepository",
    "app_to_dict",
    "category_to_dict",
    # Query builder
    "AppListFilters",
    "AppListQuery",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "build_app_list_query",
    "build_search_query",
    "eligible_conditions",
]
