"""Shared base for SQLModel entities"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import BigInteger, DateTime, Integer
from sqlmodel import SQLModel

# SQLite only autoincrements INTEGER primary keys
IdType = BigInteger().with_variant(Integer(), "sqlite")

# Timestamps are stored as timezone-aware UTC
TimestampType = DateTime(timezone=True)


class BaseModel(SQLModel):
    """Base class for all domain entities"""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive timestamp read back from a backend that drops the offset"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
