"""
SQLAlchemy Base Model and Mixins

Declarative base shared by the catalog and activity models.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Base class for all catalog models.
    
    Provides:
    - Column-wise dict conversion for API responses
    - Readable repr (id and name when the model has one)
    """
    
    def to_dict(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """
        Column values keyed by column name.

        Enum values are unwrapped; relationships are not included.
        """
        skipped = set(exclude)
        data = {}
        for column in self.__table__.columns:
            if column.name in skipped:
                continue
            value = getattr(self, column.key)
            if isinstance(value, Enum):
                value = value.value
            data[column.name] = value
        return data
    
    def __repr__(self) -> str:
        name = getattr(self, "name", None)
        if name is not None:
            return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)}, name={name!r})>"
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class TimestampMixin:
    """
    created_at / updated_at columns, filled by the database clock.
    
    Usage:
        class Review(Base, TimestampMixin):
            ...
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=func.now(),
        nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
        nullable=True
    )
