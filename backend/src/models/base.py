"""Dataclass bases with common mixins for in-memory records."""
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from uuid6 import uuid7


def utc_now() -> datetime:
    """Current wall-clock time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def new_id() -> UUID:
    """Generate a time-ordered UUIDv7 record id."""
    return uuid7()


@dataclass(kw_only=True)
class UUIDv7Mixin:
    """Mixin that adds an immutable, time-ordered UUIDv7 primary key."""

    id: UUID = field(default_factory=new_id)


@dataclass(kw_only=True)
class TimestampMixin:
    """
    Mixin that adds created_at and updated_at fields.

    All timestamps are timezone-aware UTC. Stores set both explicitly so an
    injected clock controls them; the defaults only serve ad-hoc construction.
    """

    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
