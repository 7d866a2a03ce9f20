"""
Tests for AppStatsRepository aggregation
"""
from datetime import datetime

import pytest

from processor.ranker import AppStats, month_window_start, week_window_start
from repositories import AppStatsRepository


async def fetch_stats(database, now):
    async with database.session() as session:
        rows = await AppStatsRepository(session).get_eligible_stats(
            month_window_start(now), week_window_start(now)
        )
    return {row["id"]: row for row in rows}


@pytest.mark.asyncio
async def test_rating_summary(database, seeder):
    rated = await seeder.app("Rated", ratings=[5, 4, 3])
    unrated = await seeder.app("Unrated")

    stats = await fetch_stats(database, datetime(2026, 3, 4, 12, 0))

    assert stats[rated]["avg_rating"] == pytest.approx(4.0)
    assert stats[rated]["review_count"] == 3
    assert stats[unrated]["avg_rating"] is None
    assert stats[unrated]["review_count"] == 0


@pytest.mark.asyncio
async def test_only_eligible_apps(database, seeder):
    active = await seeder.app("Active")
    await seeder.app("Private", is_public=False)
    await seeder.app("Testing", status="testing")

    stats = await fetch_stats(database, datetime(2026, 3, 4, 12, 0))

    assert list(stats) == [active]


@pytest.mark.asyncio
async def test_usage_windows(database, seeder):
    # Wednesday 4 March 2026: month starts 1 March, week starts Monday 2 March
    now = datetime(2026, 3, 4, 12, 0)
    app_id = await seeder.app("Windowed", usage_count=42)

    await seeder.usage(app_id, datetime(2026, 2, 27, 9, 0), count=3)   # neither
    await seeder.usage(app_id, datetime(2026, 3, 1, 10, 0), count=2)   # month only
    await seeder.usage(app_id, datetime(2026, 3, 2, 0, 0))             # week boundary
    await seeder.usage(app_id, datetime(2026, 3, 3, 18, 0), count=2)   # both

    row = (await fetch_stats(database, now))[app_id]

    assert row["usage_count"] == 42
    assert row["monthly_usage"] == 5
    assert row["weekly_usage"] == 3


@pytest.mark.asyncio
async def test_week_crossing_month_boundary(database, seeder):
    # Wednesday 1 April 2026: week started Monday 30 March
    now = datetime(2026, 4, 1, 12, 0)
    app_id = await seeder.app("Crossing")

    await seeder.usage(app_id, datetime(2026, 3, 31, 8, 0))
    await seeder.usage(app_id, datetime(2026, 4, 1, 8, 0))

    row = (await fetch_stats(database, now))[app_id]

    assert row["monthly_usage"] == 1
    assert row["weekly_usage"] == 2


@pytest.mark.asyncio
async def test_rows_map_to_app_stats(database, seeder):
    category_id = await seeder.category("Marketing", color="#f97316")
    app_id = await seeder.app("Copywriter", ratings=[4, 5], usage_count=7, category_id=category_id)

    row = (await fetch_stats(database, datetime(2026, 3, 4)))[app_id]
    stats = AppStats.from_row(row)

    assert stats.avg_rating == pytest.approx(4.5)
    assert stats.review_count == 2
    assert stats.usage_count == 7
    assert stats.category.name == "Marketing"
    assert stats.category.color == "#f97316"
