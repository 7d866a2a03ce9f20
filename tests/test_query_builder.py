"""
Tests for the app listing query builder and AppRepository
"""
from datetime import datetime

import pytest

from repositories import AppListFilters, AppRepository, build_app_list_query
from repositories.query_builder import escape_like, resolve_page
from utils.exceptions import InvalidArgumentError


class TestValidation:

    def test_escape_like(self):
        assert escape_like("100%_done") == "100\\%\\_done"

    def test_page_offset(self):
        assert resolve_page(3, 20) == (3, 20, 40)

    def test_page_size_capped(self):
        assert resolve_page(1, 500) == (1, 100, 0)

    @pytest.mark.parametrize("page, limit, field", [(0, 10, "page"), (1, 0, "limit"), (1, -3, "limit")])
    def test_rejects_non_positive(self, page, limit, field):
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_page(page, limit)
        assert exc_info.value.field == field

    @pytest.mark.parametrize("filters, field", [
        (AppListFilters(sort_by="password"), "sort_by"),
        (AppListFilters(order="sideways"), "order"),
        (AppListFilters(status="retired"), "status"),
    ])
    def test_rejects_unknown_values(self, filters, field):
        with pytest.raises(InvalidArgumentError) as exc_info:
            build_app_list_query(filters)
        assert exc_info.value.field == field


async def list_apps(database, **filters):
    async with database.session() as session:
        return await AppRepository(session).list_apps(AppListFilters(**filters))


@pytest.mark.asyncio
async def test_text_search_is_case_insensitive(database, seeder):
    writer = await seeder.app("Report Writer", description="Drafts weekly reports")
    await seeder.app("Translator", description="Translates documents")

    apps, total, _, _ = await list_apps(database, q="REPORT")

    assert total == 1
    assert [app["id"] for app in apps] == [writer]


@pytest.mark.asyncio
async def test_wildcards_match_literally(database, seeder):
    literal = await seeder.app("100% uptime bot")
    await seeder.app("100 uptime bot")

    apps, _, _, _ = await list_apps(database, q="100%")

    assert [app["id"] for app in apps] == [literal]


@pytest.mark.asyncio
async def test_tag_filter_has_no_duplicates(database, seeder):
    nlp = await seeder.tag("nlp")
    vision = await seeder.tag("vision")
    both = await seeder.app("Both", tag_ids=[nlp, vision])
    one = await seeder.app("One", tag_ids=[vision])
    await seeder.app("None")

    apps, total, _, _ = await list_apps(database, tags=[nlp, vision], sort_by="name", order="asc")

    assert total == 2
    assert [app["id"] for app in apps] == [both, one]
    assert [tag["name"] for tag in apps[0]["tags"]] == ["nlp", "vision"]


@pytest.mark.asyncio
async def test_filters_combine(database, seeder):
    category_id = await seeder.category("Finance")
    match = await seeder.app("Budget", category_id=category_id, creator_id=7, status="testing", is_public=False)
    await seeder.app("Budget copy", category_id=category_id, creator_id=8, status="testing", is_public=False)
    await seeder.app("Other", creator_id=7)

    apps, total, _, _ = await list_apps(
        database, category_id=category_id, creator_id=7, status="testing", is_public=False
    )

    assert total == 1
    assert apps[0]["id"] == match
    assert apps[0]["category"]["name"] == "Finance"


@pytest.mark.asyncio
async def test_pagination(database, seeder):
    ids = [await seeder.app(f"App {i:02d}") for i in range(25)]

    first, total, page, limit = await list_apps(database, sort_by="name", order="asc", page=1, limit=10)
    last, _, _, _ = await list_apps(database, sort_by="name", order="asc", page=3, limit=10)

    assert total == 25
    assert (page, limit) == (1, 10)
    assert [app["id"] for app in first] == ids[:10]
    assert [app["id"] for app in last] == ids[20:]


@pytest.mark.asyncio
async def test_sort_by_rating_puts_unrated_last(database, seeder):
    unrated = await seeder.app("Unrated")
    low = await seeder.app("Low", ratings=[2])
    high = await seeder.app("High", ratings=[5, 4])

    desc_apps, _, _, _ = await list_apps(database, sort_by="avg_rating", order="desc")
    asc_apps, _, _, _ = await list_apps(database, sort_by="avg_rating", order="asc")

    assert [app["id"] for app in desc_apps] == [high, low, unrated]
    assert [app["id"] for app in asc_apps] == [low, high, unrated]
    assert desc_apps[0]["avg_rating"] == 4.5
    assert desc_apps[2]["avg_rating"] is None


@pytest.mark.asyncio
async def test_popular_and_recent(database, seeder):
    busy = await seeder.app("Busy", usage_count=90, created_at=datetime(2026, 1, 1))
    rated = await seeder.app("Rated", usage_count=10, ratings=[5], created_at=datetime(2026, 2, 1))
    quiet = await seeder.app("Quiet", usage_count=10, created_at=datetime(2026, 3, 1))
    await seeder.app("Hidden", usage_count=1000, is_public=False)

    async with database.session() as session:
        repo = AppRepository(session)
        popular = await repo.get_popular(10)
        recent = await repo.get_recent(2)

    assert [app["id"] for app in popular] == [busy, rated, quiet]
    assert [app["id"] for app in recent] == [quiet, rated]


@pytest.mark.asyncio
async def test_search_orders_by_usage(database, seeder):
    low = await seeder.app("Chat helper", usage_count=1)
    high = await seeder.app("Support", description="Chat for support", usage_count=50)
    await seeder.app("Chat archived", usage_count=500, status="archived")

    async with database.session() as session:
        results = await AppRepository(session).search("chat", 20)

    assert [app["id"] for app in results] == [high, low]


@pytest.mark.asyncio
async def test_detail_includes_latest_reviews(database, seeder):
    app_id = await seeder.app("Detailed", ratings=[1, 2, 3, 4, 5, 5])

    async with database.session() as session:
        repo = AppRepository(session)
        detail = await repo.get_with_details(app_id)
        missing = await repo.get_with_details(999)

    assert detail["review_count"] == 6
    assert len(detail["reviews"]) == 5
    assert "app_id" not in detail["reviews"][0]
    assert missing is None


@pytest.mark.asyncio
async def test_base_lookups(database, seeder):
    app_id = await seeder.app("Lookup", status="maintenance")

    async with database.session() as session:
        repo = AppRepository(session)
        app = await repo.get(app_id)
        total = await repo.count()

    assert app.name == "Lookup"
    assert app.status == "maintenance"
    assert total == 1
