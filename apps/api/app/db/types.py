"""Portable column types shared by the ORM models."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB


# Native UUID / JSONB on PostgreSQL, emulated on SQLite (local + test databases)
GUID = Uuid(as_uuid=True)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp for Python-side column defaults."""
    return datetime.now(timezone.utc)
