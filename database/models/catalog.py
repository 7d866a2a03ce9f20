"""
Catalog Models

Categories, tags and the AI apps themselves. Owned by catalog management;
the ranking code only reads these tables.
"""
from datetime import datetime
from typing import Optional, List

from sqlalchemy import String, Integer, Boolean, Text, DateTime, Index, ForeignKey, Column, Table, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from constants import AppStatus
from .base import Base, TimestampMixin


app_tags = Table(
    "app_tags",
    Base.metadata,
    Column("app_id", Integer, ForeignKey("ai_apps.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    Index("idx_app_tags_tag", "tag_id"),
)


class Category(Base, TimestampMixin):
    """App category (business domain, target audience or difficulty)."""
    __tablename__ = "categories"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # 'business', 'target', 'difficulty'
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)


class Tag(Base):
    """Free-form label attached to apps."""
    __tablename__ = "tags"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=func.now(), nullable=True)


class AIApp(Base, TimestampMixin):
    """
    A company-built AI application listed in the catalog.
    
    usage_count is the cumulative counter maintained by usage tracking;
    per-window counts are aggregated from usage_logs.
    """
    __tablename__ = "ai_apps"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    
    # Content
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    model_info: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    environment: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    
    # Ownership
    category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    creator_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    
    # Lifecycle & visibility
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AppStatus.DEVELOPMENT.value)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    
    # Counters
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    
    # Relationships
    category: Mapped[Optional[Category]] = relationship(lazy="joined")
    tags: Mapped[List[Tag]] = relationship(secondary=app_tags, lazy="selectin", order_by=Tag.name)
    
    __table_args__ = (
        Index('idx_ai_apps_visibility', 'is_public', 'status'),
        Index('idx_ai_apps_category', 'category_id'),
        Index('idx_ai_apps_creator', 'creator_id'),
    )
