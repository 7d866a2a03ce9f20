"""
SQLAlchemy ORM Models

This module defines all database models using SQLAlchemy ORM.
Models are organized by domain:
- Catalog: Categories, tags and AI apps
- Activity: Reviews and usage logs (aggregated by the ranker)
"""

from .base import Base, TimestampMixin
from .catalog import Category, Tag, AIApp, app_tags
from .activity import Review, UsageLog

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Catalog
    "Category",
    "Tag",
    "AIApp",
    "app_tags",
    # Activity
    "Review",
    "UsageLog",
]
