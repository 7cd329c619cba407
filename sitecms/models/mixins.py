"""Mixins and time helpers for SQLAlchemy models."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, func


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class CreatedAtMixin:
    """Mixin to add a created_at timestamp column."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
