"""
Constants package for the AI App Catalog.

Contains shared enums used by models, repositories and the ranker.
"""

from .enums import (
    AppStatus,
    CategoryType,
    ActionType,
    RankingType,
    SortField,
    SortOrder,
    # Dict versions
    APP_STATUSES,
    RANKING_TYPES,
    SORT_FIELDS,
)

__all__ = [
    # Enums
    "AppStatus",
    "CategoryType",
    "ActionType",
    "RankingType",
    "SortField",
    "SortOrder",
    # Dict versions
    "APP_STATUSES",
    "RANKING_TYPES",
    "SORT_FIELDS",
]
