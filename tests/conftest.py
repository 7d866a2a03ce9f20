"""
Shared fixtures: a temp-file SQLite catalog and a seeding helper.
"""
import asyncio
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import pytest
from sqlalchemy import select

from database import Database
from database.models import AIApp, Category, Review, Tag, UsageLog
from repositories import AppRepository


class CatalogSeeder:
    """Insert catalog rows through the real models."""

    def __init__(self, database: Database):
        self.database = database

    async def category(self, name: str = "Productivity", type: str = "business", color: str = "#2563eb") -> int:
        async with self.database.session() as session:
            category = Category(name=name, type=type, color=color)
            session.add(category)
            await session.flush()
            return category.id

    async def tag(self, name: str, color: Optional[str] = None) -> int:
        async with self.database.session() as session:
            tag = Tag(name=name, color=color)
            session.add(tag)
            await session.flush()
            return tag.id

    async def app(
        self,
        name: str,
        *,
        description: str = "",
        usage_count: int = 0,
        status: str = "active",
        is_public: bool = True,
        ratings: Iterable[int] = (),
        category_id: Optional[int] = None,
        creator_id: Optional[int] = None,
        tag_ids: Iterable[int] = (),
        created_at: Optional[datetime] = None,
    ) -> int:
        async with self.database.session() as session:
            app = AIApp(
                name=name,
                description=description,
                usage_count=usage_count,
                status=status,
                is_public=is_public,
                category_id=category_id,
                creator_id=creator_id,
            )
            if created_at is not None:
                app.created_at = created_at
            tag_ids = list(tag_ids)
            if tag_ids:
                result = await session.execute(select(Tag).where(Tag.id.in_(tag_ids)))
                app.tags = list(result.scalars().all())
            await AppRepository(session).add(app)

            for rating in ratings:
                session.add(Review(app_id=app.id, rating=rating, comment=f"{rating} stars"))
            return app.id

    async def usage(self, app_id: int, when: datetime, count: int = 1, action_type: str = "use") -> None:
        async with self.database.session() as session:
            for _ in range(count):
                session.add(UsageLog(app_id=app_id, action_type=action_type, created_at=when))


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def database_url(tmp_path) -> str:
    return sqlite_url(tmp_path / "catalog.db")


@pytest.fixture
async def database(database_url):
    db = Database(database_url, echo=False)
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def seeder(database) -> CatalogSeeder:
    return CatalogSeeder(database)


@pytest.fixture
def seed_catalog(database_url):
    """
    Synchronous seeding for HTTP tests.

    The API opens its own engine inside the TestClient loop, so rows are
    written through a short-lived Database on a separate loop.
    """

    def _seed(build=None):
        async def _run():
            db = Database(database_url, echo=False)
            await db.create_tables()
            try:
                if build is not None:
                    await build(CatalogSeeder(db))
            finally:
                await db.dispose()

        asyncio.run(_run())

    return _seed
