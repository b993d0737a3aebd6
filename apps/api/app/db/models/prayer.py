"""SQLAlchemy ORM models for prayer requests."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    String,
    Text,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import DEFAULT_PRAYER_STATUS
from app.db.models.auth import Location, User
from app.db.models.connect_cards import ConnectCard
from app.db.types import GUID, utcnow


class PrayerBatch(Base):
    """A named group of prayer requests handed to one prayer team member."""

    __tablename__ = "prayer_batches"
    __table_args__ = (
        Index("idx_prayer_batches_org_location", "organization_id", "location_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    location_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    assigned_to_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    location: Mapped[Location | None] = relationship()
    assigned_to: Mapped[User | None] = relationship(foreign_keys=[assigned_to_id])
    prayer_requests: Mapped[list["PrayerRequest"]] = relationship(
        back_populates="prayer_batch"
    )


class PrayerRequest(Base):
    """
    A prayer request, usually spawned from a reviewed connect card.

    Privacy:
    - Public: visible to everyone in location scope
    - Private: visible only to owner/admin or the assigned team member
    """

    __tablename__ = "prayer_requests"
    __table_args__ = (
        Index("idx_prayer_requests_org_location", "organization_id", "location_id"),
        Index("idx_prayer_requests_org_status", "organization_id", "status"),
        Index("idx_prayer_requests_org_assigned", "organization_id", "assigned_to_id"),
        Index("idx_prayer_requests_org_created", "organization_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    location_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    connect_card_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("connect_cards.id", ondelete="SET NULL"), nullable=True
    )
    prayer_batch_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("prayer_batches.id", ondelete="SET NULL"), nullable=True
    )

    request: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    submitted_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    submitter_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    submitter_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    is_private: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    is_urgent: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_PRAYER_STATUS.value, nullable=False
    )
    assigned_to_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    answered_date: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    location: Mapped[Location | None] = relationship()
    assigned_to: Mapped[User | None] = relationship(foreign_keys=[assigned_to_id])
    connect_card: Mapped[ConnectCard | None] = relationship()
    prayer_batch: Mapped[PrayerBatch | None] = relationship(
        back_populates="prayer_requests"
    )
