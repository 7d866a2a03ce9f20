"""
Database Session Management

Provides the Database object that owns the SQLAlchemy async engine and
session factory. One instance is created at process start, handed to the
services that need it, and disposed at shutdown.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from loguru import logger

from config import settings
from .models import Base


class Database:
    """
    Engine + session factory with an explicit lifecycle.

    Usage:
        database = Database(settings.DATABASE_URL)
        await database.connect()

        async with database.session() as session:
            result = await session.execute(...)

        await database.dispose()
    """

    def __init__(
        self,
        url: str = None,
        pool_size: int = None,
        max_overflow: int = None,
        pool_timeout: float = None,
        echo: bool = None,
    ):
        self.url = url or settings.DATABASE_URL
        self.pool_size = pool_size or settings.DB_POOL_SIZE
        self.max_overflow = settings.DB_MAX_OVERFLOW if max_overflow is None else max_overflow
        self.pool_timeout = pool_timeout or settings.DB_POOL_TIMEOUT
        self.echo = settings.LOG_LEVEL == "DEBUG" if echo is None else echo

        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._engine

    async def connect(self) -> AsyncEngine:
        """
        Create the engine and session factory.

        Safe to call more than once; the existing engine is reused.
        """
        if self._engine is not None:
            return self._engine

        logger.info(f"Initializing database engine: {self.safe_url()}")

        if self.is_sqlite:
            # SQLite specific settings
            self._engine = create_async_engine(
                self.url,
                echo=self.echo,
                connect_args={"check_same_thread": False},
            )
        else:
            self._engine = create_async_engine(
                self.url,
                echo=self.echo,
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_timeout=self.pool_timeout,
                pool_pre_ping=True,
            )

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

        logger.info("Database engine initialized successfully")
        return self._engine

    async def dispose(self) -> None:
        """Close all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine closed")

    async def create_tables(self) -> None:
        """
        Create all tables in the database.

        Note: This is for development/testing only.
        Use Alembic migrations for production.
        """
        engine = await self.connect()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_tables(self) -> None:
        """
        Drop all tables in the database.

        Warning: This will delete all data!
        """
        engine = await self.connect()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("Database tables dropped")

    async def ping(self) -> bool:
        """Return True when a trivial query succeeds."""
        async with self.session() as session:
            await session.execute(text("SELECT 1"))
        return True

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session as async context manager.

        Usage:
            async with database.session() as session:
                result = await session.execute(...)

        The session is committed on success, rolled back on exception
        (including cancellation), and always closed.
        """
        if self._session_factory is None:
            await self.connect()

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise
        finally:
            await session.close()

    def safe_url(self) -> str:
        """URL with any password masked, for logs."""
        if "@" not in self.url or "://" not in self.url:
            return self.url
        scheme, rest = self.url.split("://", 1)
        credentials, host = rest.rsplit("@", 1)
        user = credentials.split(":", 1)[0]
        return f"{scheme}://{user}:***@{host}"


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the Database attached at startup."""
    return request.app.state.database


async def get_session_dependency(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for getting database session.

    Usage in FastAPI:
        @router.get("/items")
        async def get_items(session: AsyncSession = Depends(get_session_dependency)):
            ...
    """
    async with get_database(request).session() as session:
        yield session
