"""Columns shared by every table."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdentityMixin:
    # Opaque UUID4 string generated by the store at insert time, never reassigned.
    # String(36) instead of a native UUID type keeps the schema portable to SQLite.
    id: Mapped[str] = mapped_column(String(36), primary_key=True)


class TimestampMixin:
    # Server-assigned. updated_at is refreshed by Core UPDATE statements via onupdate.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
