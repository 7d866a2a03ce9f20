"""
Activity Models

Reviews and usage logs. Both are append-only from the ranking side and are
aggregated into avg_rating / review_count and windowed usage counts.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Integer, Text, DateTime, Index, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from constants import ActionType
from .base import Base, TimestampMixin


class Review(Base, TimestampMixin):
    """A 1-5 star rating with an optional comment."""
    __tablename__ = "reviews"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ai_apps.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    
    __table_args__ = (
        CheckConstraint('rating >= 1 AND rating <= 5', name='ck_reviews_rating_range'),
        Index('idx_reviews_app', 'app_id'),
    )


class UsageLog(Base):
    """One view / use / download of an app."""
    __tablename__ = "usage_logs"
    
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ai_apps.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    action_type: Mapped[str] = mapped_column(String(20), nullable=False, default=ActionType.VIEW.value)
    session_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    
    __table_args__ = (
        Index('idx_usage_logs_app_time', 'app_id', 'created_at'),
    )
