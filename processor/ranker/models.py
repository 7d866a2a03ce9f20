"""
Data models for the Ranker module.
"""
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from constants import AppStatus, RankingType


@dataclass(frozen=True)
class CategoryRef:
    """Category summary attached to ranking items."""
    id: int
    name: str
    type: Optional[str] = None
    color: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "color": self.color,
        }


@dataclass(frozen=True)
class AppStats:
    """
    Aggregated statistics for one app.

    avg_rating is None when the app has no reviews.
    """
    id: int
    name: str
    description: str = ""
    is_public: bool = True
    status: str = AppStatus.ACTIVE.value
    avg_rating: Optional[float] = None
    review_count: int = 0
    usage_count: int = 0
    monthly_usage: int = 0
    weekly_usage: int = 0
    category: Optional[CategoryRef] = None

    @classmethod
    def from_row(cls, row: Mapping) -> "AppStats":
        """Build from an aggregation row (see AppStatsRepository)."""
        category = None
        if row.get("category_id") is not None:
            category = CategoryRef(
                id=row["category_id"],
                name=row.get("category_name") or "",
                type=row.get("category_type"),
                color=row.get("category_color"),
            )

        avg_rating = row.get("avg_rating")
        return cls(
            id=row["id"],
            name=row["name"],
            description=row.get("description") or "",
            is_public=bool(row.get("is_public", True)),
            status=row.get("status") or AppStatus.ACTIVE.value,
            avg_rating=float(avg_rating) if avg_rating is not None else None,
            review_count=int(row.get("review_count") or 0),
            usage_count=int(row.get("usage_count") or 0),
            monthly_usage=int(row.get("monthly_usage") or 0),
            weekly_usage=int(row.get("weekly_usage") or 0),
            category=category,
        )


@dataclass(frozen=True)
class RankingResult:
    """
    One ranked app.

    Fields populated per ranking type:
        rating   -> review_count
        combined -> review_count, ranking_score
        monthly  -> monthly_usage
        weekly   -> weekly_usage
    The remaining optional fields stay None and are left out of to_dict().
    """
    id: int
    name: str
    description: str
    rank: int
    ranking_type: RankingType
    avg_rating: Optional[float]
    usage_count: int
    review_count: Optional[int] = None
    ranking_score: Optional[float] = None
    monthly_usage: Optional[int] = None
    weekly_usage: Optional[int] = None
    category: Optional[CategoryRef] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "rank": self.rank,
            "avg_rating": round(self.avg_rating, 2) if self.avg_rating is not None else None,
            "usage_count": self.usage_count,
        }
        if self.review_count is not None:
            data["review_count"] = self.review_count
        if self.ranking_score is not None:
            data["ranking_score"] = self.ranking_score
        if self.monthly_usage is not None:
            data["monthly_usage"] = self.monthly_usage
        if self.weekly_usage is not None:
            data["weekly_usage"] = self.weekly_usage
        if self.category is not None:
            data["category"] = self.category.to_dict()
        return data


@dataclass(frozen=True)
class RankingSnapshot:
    """
    Materialized rankings for every type, computed from one statistics read.

    Immutable: a refresh builds a new snapshot and swaps the reference.
    """
    computed_at: datetime
    rankings: Mapping[RankingType, tuple] = field(default_factory=dict)
    generation: int = 0

    def __post_init__(self):
        frozen = {key: tuple(value) for key, value in self.rankings.items()}
        object.__setattr__(self, "rankings", MappingProxyType(frozen))

    def get(self, ranking_type: RankingType, limit: int) -> list[RankingResult]:
        return list(self.rankings.get(ranking_type, ())[:limit])

    def age_seconds(self, now: datetime) -> float:
        return (now - self.computed_at).total_seconds()

    def summary(self) -> dict:
        return {
            "computed_at": self.computed_at.isoformat(),
            "generation": self.generation,
            "counts": {key.value: len(value) for key, value in self.rankings.items()},
        }
