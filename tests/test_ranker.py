"""
Tests for the Ranker (pure ranking policies)
"""
from datetime import datetime

import pytest

from constants import RankingType
from processor.ranker import (
    AppStats,
    CategoryRef,
    Ranker,
    RankingSnapshot,
    calculate_combined_score,
    clamp_limit,
    month_window_start,
    resolve_ranking_type,
    week_window_start,
)
from utils.exceptions import InvalidArgumentError


def make_stats(app_id, **overrides) -> AppStats:
    values = {"id": app_id, "name": f"App {app_id}", "description": f"Description {app_id}"}
    values.update(overrides)
    return AppStats(**values)


@pytest.fixture
def ranker():
    return Ranker()


@pytest.fixture
def two_apps():
    return [
        make_stats(1, avg_rating=4.5, review_count=5, usage_count=100),
        make_stats(2, avg_rating=4.8, review_count=2, usage_count=500),
    ]


class TestScenarios:

    def test_rating_requires_three_reviews(self, ranker, two_apps):
        results = ranker.rank(two_apps, "rating", 10)

        assert [(r.id, r.rank) for r in results] == [(1, 1)]
        assert results[0].review_count == 5

    def test_usage_ignores_review_threshold(self, ranker, two_apps):
        results = ranker.rank(two_apps, "usage", 10)

        assert [(r.id, r.rank) for r in results] == [(2, 1), (1, 2)]

    def test_combined_scores(self, ranker, two_apps):
        results = ranker.rank(two_apps, RankingType.COMBINED)

        assert [r.id for r in results] == [2, 1]
        assert results[0].ranking_score == pytest.approx(0.984)
        assert results[1].ranking_score == pytest.approx(0.48)

    def test_empty_input(self, ranker):
        for ranking_type in RankingType:
            assert ranker.rank([], ranking_type) == []


class TestRankProperties:

    @pytest.fixture
    def catalog(self):
        return [
            make_stats(i, avg_rating=3 + (i % 3) * 0.5, review_count=i % 5,
                       usage_count=(i * 37) % 11, monthly_usage=i % 4, weekly_usage=i % 2)
            for i in range(1, 31)
        ]

    @pytest.mark.parametrize("ranking_type", list(RankingType))
    def test_dense_ranks(self, ranker, catalog, ranking_type):
        results = ranker.rank(catalog, ranking_type, 50)

        assert [r.rank for r in results] == list(range(1, len(results) + 1))

    @pytest.mark.parametrize("ranking_type", list(RankingType))
    def test_deterministic(self, ranker, catalog, ranking_type):
        first = ranker.rank(catalog, ranking_type, 50)
        second = ranker.rank(list(reversed(catalog)), ranking_type, 50)

        assert first == second

    def test_usage_monotone(self, ranker, catalog):
        usage = [r.usage_count for r in ranker.rank(catalog, "usage", 50)]

        assert usage == sorted(usage, reverse=True)

    def test_ties_broken_by_id(self, ranker):
        stats = [make_stats(i, usage_count=5) for i in (7, 3, 5)]

        assert [r.id for r in ranker.rank(stats, "usage")] == [3, 5, 7]

    def test_rating_tie_broken_by_usage(self, ranker):
        stats = [
            make_stats(1, avg_rating=4.0, review_count=3, usage_count=10),
            make_stats(2, avg_rating=4.0, review_count=3, usage_count=20),
        ]

        assert [r.id for r in ranker.rank(stats, "rating")] == [2, 1]

    def test_combined_sorts_before_rounding(self, ranker):
        # 0.599994 and 0.6 both display as 0.6
        stats = [make_stats(1, usage_count=99999), make_stats(2, usage_count=100000)]

        results = ranker.rank(stats, "combined")

        assert [(r.id, r.rank) for r in results] == [(2, 1), (1, 2)]
        assert [r.ranking_score for r in results] == [0.6, 0.6]

    def test_combined_score_bounds(self, ranker, catalog):
        for result in ranker.rank(catalog, "combined", 50):
            assert 0.0 <= result.ranking_score <= 1.0

    def test_windowed_types(self, ranker):
        stats = [
            make_stats(1, usage_count=100, monthly_usage=1, weekly_usage=0),
            make_stats(2, usage_count=1, monthly_usage=9, weekly_usage=4),
        ]

        monthly = ranker.rank(stats, "monthly")
        weekly = ranker.rank(stats, "weekly")

        assert [(r.id, r.monthly_usage) for r in monthly] == [(2, 9), (1, 1)]
        assert [(r.id, r.weekly_usage) for r in weekly] == [(2, 4), (1, 0)]


class TestEligibility:

    @pytest.mark.parametrize("ranking_type", list(RankingType))
    def test_only_public_active(self, ranker, ranking_type):
        stats = [
            make_stats(1, avg_rating=5.0, review_count=10, usage_count=10),
            make_stats(2, avg_rating=5.0, review_count=10, usage_count=99, is_public=False),
            make_stats(3, avg_rating=5.0, review_count=10, usage_count=99, status="deprecated"),
        ]

        assert [r.id for r in ranker.rank(stats, ranking_type)] == [1]

    def test_unrated_app_excluded_from_rating(self, ranker):
        stats = [make_stats(1, avg_rating=None, review_count=0, usage_count=10)]

        assert ranker.rank(stats, "rating") == []
        assert [r.id for r in ranker.rank(stats, "usage")] == [1]

    def test_combined_max_usage_from_eligible_set(self, ranker):
        stats = [
            make_stats(1, usage_count=50),
            make_stats(2, usage_count=1000, is_public=False),
        ]

        result = ranker.rank(stats, "combined")[0]

        assert result.ranking_score == pytest.approx(0.6)


class TestLimits:

    @pytest.fixture
    def many(self):
        return [make_stats(i, usage_count=i) for i in range(1, 61)]

    def test_default_limit(self, ranker, many):
        assert len(ranker.rank(many, "usage")) == 10

    def test_limit_clamped_low(self, ranker, many):
        assert len(ranker.rank(many, "usage", 0)) == 1
        assert len(ranker.rank(many, "usage", -5)) == 1

    def test_limit_clamped_high(self, ranker, many):
        assert len(ranker.rank(many, "usage", 1000)) == 50

    @pytest.mark.parametrize("bad", ["10", 2.5, True])
    def test_non_integer_limit(self, bad):
        with pytest.raises(InvalidArgumentError) as exc_info:
            clamp_limit(bad)
        assert exc_info.value.field == "limit"


class TestRankingType:

    def test_unknown_type(self, ranker):
        with pytest.raises(InvalidArgumentError) as exc_info:
            ranker.rank([], "bogus")
        assert "bogus" in exc_info.value.message
        assert exc_info.value.field == "type"

    def test_accepts_enum_and_string(self):
        assert resolve_ranking_type("weekly") is RankingType.WEEKLY
        assert resolve_ranking_type(RankingType.RATING) is RankingType.RATING


class TestScoringUtilities:

    def test_combined_score_unrated(self):
        assert calculate_combined_score(None, 0, 0) == 0.0
        assert calculate_combined_score(None, 10, 10) == pytest.approx(0.6)

    def test_combined_score_perfect(self):
        assert calculate_combined_score(5.0, 10, 10) == pytest.approx(1.0)

    def test_month_window(self):
        now = datetime(2026, 3, 4, 15, 30, 12)
        assert month_window_start(now) == datetime(2026, 3, 1)

    def test_week_window_crosses_month(self):
        # Wednesday 1 April -> Monday 30 March
        assert week_window_start(datetime(2026, 4, 1, 9, 0)) == datetime(2026, 3, 30)

    def test_week_window_on_monday(self):
        assert week_window_start(datetime(2026, 3, 2, 0, 0)) == datetime(2026, 3, 2)


class TestResultSerialization:

    def test_fields_per_type(self, ranker):
        stats = [make_stats(1, avg_rating=4.123, review_count=4, usage_count=3,
                            monthly_usage=2, weekly_usage=1,
                            category=CategoryRef(id=9, name="Ops", type="business", color="#000"))]

        rating = ranker.rank(stats, "rating")[0].to_dict()
        usage = ranker.rank(stats, "usage")[0].to_dict()
        combined = ranker.rank(stats, "combined")[0].to_dict()
        monthly = ranker.rank(stats, "monthly")[0].to_dict()
        weekly = ranker.rank(stats, "weekly")[0].to_dict()

        assert rating["avg_rating"] == 4.12
        assert rating["review_count"] == 4 and "ranking_score" not in rating
        assert "review_count" not in usage and "monthly_usage" not in usage
        assert {"review_count", "ranking_score"} <= combined.keys()
        assert monthly["monthly_usage"] == 2 and "weekly_usage" not in monthly
        assert weekly["weekly_usage"] == 1 and "monthly_usage" not in weekly
        assert usage["category"] == {"id": 9, "name": "Ops", "type": "business", "color": "#000"}

    def test_unrated_serializes_null(self, ranker):
        result = ranker.rank([make_stats(1, usage_count=1)], "usage")[0].to_dict()

        assert result["avg_rating"] is None
        assert "category" not in result


class TestSnapshot:

    def test_snapshot_is_immutable(self, ranker, two_apps):
        snapshot = RankingSnapshot(computed_at=datetime(2026, 1, 1), rankings=ranker.rank_all(two_apps))

        with pytest.raises(TypeError):
            snapshot.rankings[RankingType.USAGE] = ()
        assert [r.id for r in snapshot.get(RankingType.USAGE, 1)] == [2]
