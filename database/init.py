"""
Schema setup helpers

create_all for development and tests, Alembic for deployed databases, and
per-table row counts for diagnostics.
"""
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from .models import Base
from .session import Database


async def init_database_async(database: Database) -> None:
    """Create every catalog table that does not exist yet (no migrations)."""
    await database.create_tables()
    logger.info(f"Catalog schema ready ({len(Base.metadata.tables)} tables)")


async def get_table_counts_async(database: Database) -> dict:
    """
    Row count per catalog table.

    A table that cannot be read (missing, locked) reports 0 and is logged.
    """
    counts = {}
    async with database.session() as session:
        for name, table in Base.metadata.tables.items():
            try:
                result = await session.execute(select(func.count()).select_from(table))
                counts[name] = result.scalar()
            except SQLAlchemyError as e:
                logger.warning(f"Could not count {name}: {e}")
                counts[name] = 0

    return counts


def run_migrations(revision: str = "head") -> None:
    """
    Upgrade the database at settings.DATABASE_URL to `revision`.

    Must be called outside a running event loop; migrations/env.py starts
    its own.
    """
    from alembic import command
    from alembic.config import Config
    from config import settings

    alembic_cfg = Config(str(settings.BASE_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(settings.BASE_DIR / "migrations"))
    command.upgrade(alembic_cfg, revision)
    logger.info(f"Database migrated to {revision}")
