#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the storefront models.

- UUID primary key (String(36)) generated by the application
- created_at / updated_at timestamps

Notes:
- Timestamps are set on the Python side so rows inserted within the same
  second still sort in insertion order (SQLite CURRENT_TIMESTAMP has
  second resolution).
- Persistence goes through DBStorage; models never reach for a global
  session.
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_id(value) -> bool:
    """True when value is shaped like an identifier this store generates."""
    if not isinstance(value, str):
        return False
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        return False
    # Only the hyphenated 36-char form; no braces, urn: prefix or bare hex
    return str(parsed) == value.lower()


class BaseModel:
    """
    Base mixin for all persistent models.

    - id, created_at, updated_at
    - kwargs constructor that tolerates a stray __class__ key
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # Ensure an id exists if caller passed none
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id}) {self.__dict__}"

