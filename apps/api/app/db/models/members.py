"""SQLAlchemy ORM models for members and volunteers.

Volunteer data currently lives in two places: the legacy ``volunteers`` table
(plus ``volunteer_categories``) and the unified ``church_members`` record.
Writes go to both through ``app.services.volunteer_dual_write``.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import DEFAULT_BACKGROUND_CHECK_STATUS, DEFAULT_VOLUNTEER_STATUS
from app.db.types import GUID, JSONType, utcnow


class ChurchMember(Base):
    """Unified member record (volunteer fields are mirrored here)."""

    __tablename__ = "church_members"
    __table_args__ = (
        Index("idx_church_members_org", "organization_id"),
        Index("idx_church_members_org_volunteer", "organization_id", "is_volunteer"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    is_volunteer: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    # Lowercase strings ("active", "on_break", ...), not the Volunteer enums
    volunteer_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    volunteer_categories: Mapped[list[str]] = mapped_column(
        JSONType, default=list, nullable=False
    )
    volunteer_start_date: Mapped[datetime | None] = mapped_column(nullable=True)
    volunteer_end_date: Mapped[datetime | None] = mapped_column(nullable=True)
    volunteer_inactive_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    volunteer_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    emergency_contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    emergency_contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    background_check_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    background_check_date: Mapped[datetime | None] = mapped_column(nullable=True)
    background_check_expiry: Mapped[datetime | None] = mapped_column(nullable=True)
    ready_for_export: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    ready_for_export_date: Mapped[datetime | None] = mapped_column(nullable=True)
    documents_sent_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    volunteer: Mapped["Volunteer | None"] = relationship(back_populates="church_member")


class Volunteer(Base):
    """Legacy volunteer record, linked 1:1 to a ChurchMember."""

    __tablename__ = "volunteers"
    __table_args__ = (
        UniqueConstraint("church_member_id", name="uq_volunteers_church_member"),
        Index("idx_volunteers_org_status", "organization_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    church_member_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("church_members.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(30), default=DEFAULT_VOLUNTEER_STATUS.value, nullable=False
    )
    start_date: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(nullable=True)
    inactive_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    emergency_contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    emergency_contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    background_check_status: Mapped[str] = mapped_column(
        String(30), default=DEFAULT_BACKGROUND_CHECK_STATUS.value, nullable=False
    )
    background_check_date: Mapped[datetime | None] = mapped_column(nullable=True)
    background_check_expiry: Mapped[datetime | None] = mapped_column(nullable=True)
    ready_for_export: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    ready_for_export_date: Mapped[datetime | None] = mapped_column(nullable=True)
    documents_sent_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    church_member: Mapped[ChurchMember] = relationship(back_populates="volunteer")
    categories: Mapped[list["VolunteerCategory"]] = relationship(
        back_populates="volunteer", cascade="all, delete-orphan"
    )


class VolunteerCategory(Base):
    """Serving category assigned to a legacy Volunteer."""

    __tablename__ = "volunteer_categories"
    __table_args__ = (
        UniqueConstraint("volunteer_id", "category", name="uq_volunteer_categories"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    volunteer_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("volunteers.id", ondelete="CASCADE"), nullable=False
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False)

    volunteer: Mapped[Volunteer] = relationship(back_populates="categories")
