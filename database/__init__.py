"""
Database Module - AI App Catalog

This module provides database access for the catalog backend.

Structure:
    database/
    ├── __init__.py      # This file - public API
    ├── session.py       # Database object (engine + session factory)
    ├── init.py          # Database initialization utilities
    └── models/          # SQLAlchemy ORM models
        ├── __init__.py
        ├── base.py
        ├── catalog.py
        └── activity.py

Usage:
    from database import Database
    from database.models import AIApp

    database = Database()
    async with database.session() as session:
        result = await session.execute(select(AIApp))
        apps = result.scalars().all()
"""

# SQLAlchemy Models
from .models import (
    # Base
    Base,
    TimestampMixin,
    # Catalog
    Category,
    Tag,
    AIApp,
    app_tags,
    # Activity
    Review,
    UsageLog,
)

# Session Management
from .session import (
    Database,
    get_database,
    get_session_dependency,
)

# Initialization utilities
from .init import (
    init_database_async,
    get_table_counts_async,
    run_migrations,
)

__all__ = [
    # SQLAlchemy Models
    "Base",
    "TimestampMixin",
    "Category",
    "Tag",
    "AIApp",
    "app_tags",
    "Review",
    "UsageLog",
    # Session Management
    "Database",
    "get_database",
    "get_session_dependency",
    # Init utilities
    "init_database_async",
    "get_table_counts_async",
    "run_migrations",
]
