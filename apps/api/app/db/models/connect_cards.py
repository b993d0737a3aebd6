"""SQLAlchemy ORM models for connect cards and upload batches."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import DEFAULT_BATCH_STATUS, DEFAULT_CARD_STATUS
from app.db.models.auth import Location, User
from app.db.types import GUID, JSONType, utcnow


class ConnectCardBatch(Base):
    """
    Cards uploaded together at one location on one day.

    At most one PENDING batch may exist per (organization, location, day);
    the partial unique index backs up the serializable get-or-create.
    """

    __tablename__ = "connect_card_batches"
    __table_args__ = (
        Index("idx_card_batches_org_location", "organization_id", "location_id"),
        Index("idx_card_batches_org_status", "organization_id", "status"),
        Index(
            "uq_card_batches_one_pending_per_day",
            "organization_id",
            "location_id",
            "batch_date",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    location_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False
    )
    uploaded_by_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    batch_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_BATCH_STATUS.value, nullable=False
    )
    card_count: Mapped[int] = mapped_column(
        Integer, default=0, server_default=text("0"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    location: Mapped[Location] = relationship()
    cards: Mapped[list["ConnectCard"]] = relationship(
        back_populates="batch", order_by="ConnectCard.created_at"
    )


class ConnectCard(Base):
    """
    A digitized visitor/member intake card.

    Lifecycle: created on upload (PENDING), filled by OCR (EXTRACTED),
    approved by staff (REVIEWED).
    """

    __tablename__ = "connect_cards"
    __table_args__ = (
        Index("idx_connect_cards_org_location", "organization_id", "location_id"),
        Index("idx_connect_cards_org_status", "organization_id", "status"),
        Index("idx_connect_cards_org_scanned", "organization_id", "scanned_at"),
        Index("idx_connect_cards_batch", "batch_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    location_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    batch_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("connect_card_batches.id", ondelete="SET NULL"), nullable=True
    )
    image_key: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Extracted fields
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    visit_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    interests: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    volunteer_category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    prayer_request: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_CARD_STATUS.value, nullable=False
    )
    scanned_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    scanned_by_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    reviewed_by_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Export tracking ("only new" exports skip cards with last_exported_at set)
    last_exported_at: Mapped[datetime | None] = mapped_column(nullable=True)
    last_exported_by_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    last_export_format: Mapped[str | None] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    location: Mapped[Location | None] = relationship()
    batch: Mapped[ConnectCardBatch | None] = relationship(back_populates="cards")
    scanned_by: Mapped[User | None] = relationship(foreign_keys=[scanned_by_id])
