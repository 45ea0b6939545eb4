#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the bookstore catalog.

- Integer surrogate primary key on every table
- registered_at timestamp assigned on insert
- ActiveMixin: soft visibility flag; an inactive row is still a real row and
  still takes part in uniqueness and referential checks

Each table is declared as its own typed model (see subject.py, book.py, ...);
repositories query those models directly, there is no table-name lookup at runtime.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class BaseModel:
    """
    Base mixin for all persistent models.

    - id: autoincrement integer, assigned by the database on flush
    - registered_at: set client-side at insert time so it is available right
      after flush without a refresh
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    registered_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"


class ActiveMixin:
    """
    Adds the `active` flag. New rows default to active; update operations may
    flip it either way. Deletion is a separate, hard operation.
    """

    active = Column(Boolean, nullable=False, default=True)
