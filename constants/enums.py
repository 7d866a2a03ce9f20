"""
Shared Enums

Application-wide enums used across multiple modules.
"""
from enum import Enum


class AppStatus(str, Enum):
    """Lifecycle status of a catalog entry."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    DEPRECATED = "deprecated"
    ARCHIVED = "archived"


class CategoryType(str, Enum):
    """Category groupings shown in the filter sidebar."""
    BUSINESS = "business"
    TARGET = "target"
    DIFFICULTY = "difficulty"


class ActionType(str, Enum):
    """Kinds of usage events recorded against an app."""
    VIEW = "view"
    USE = "use"
    DOWNLOAD = "download"


class RankingType(str, Enum):
    """Ranking policies served by /ranking."""
    RATING = "rating"
    USAGE = "usage"
    COMBINED = "combined"
    MONTHLY = "monthly"
    WEEKLY = "weekly"


class SortField(str, Enum):
    """Columns the app listing may be sorted by."""
    NAME = "name"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    USAGE_COUNT = "usage_count"
    AVG_RATING = "avg_rating"


class SortOrder(str, Enum):
    """Sort direction."""
    ASC = "asc"
    DESC = "desc"


# Dict versions for quick membership checks and error messages
APP_STATUSES = {s.value: s.value for s in AppStatus}
RANKING_TYPES = {r.value: r.value for r in RankingType}
SORT_FIELDS = {f.value: f.value for f in SortField}
