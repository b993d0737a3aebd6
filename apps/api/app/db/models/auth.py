"""SQLAlchemy ORM models for tenants, campuses and staff."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    false,
    func,
    text,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import Role
from app.db.types import GUID, utcnow


class Organization(Base):
    """
    A church (tenant) in the multi-tenant system.

    All domain entities belong to an organization
    and must be scoped by organization_id in all queries.
    """

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    locations: Mapped[list["Location"]] = relationship(
        back_populates="organization", cascade="all, delete-orphan"
    )
    users: Mapped[list["User"]] = relationship(
        back_populates="organization", cascade="all, delete-orphan"
    )


class Location(Base):
    """
    A campus within an organization.

    Records with a NULL location_id are organization-wide.
    """

    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("organization_id", "slug", name="uq_locations_org_slug"),
        Index("idx_locations_org", "organization_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=true(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    organization: Mapped["Organization"] = relationship(back_populates="locations")


class User(Base):
    """
    A staff member of an organization.

    Location access:
    - can_see_all_locations=True: every campus in the org
    - otherwise: only default_location_id
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("organization_id", "email", name="uq_users_org_email"),
        Index("idx_users_org_role", "organization_id", "role"),
        Index("idx_users_org_location", "organization_id", "default_location_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), default=Role.STAFF.value, nullable=False
    )
    can_see_all_locations: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    default_location_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    # Incremented to revoke outstanding session tokens
    token_version: Mapped[int] = mapped_column(
        Integer, default=1, server_default=text("1"), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=true(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    organization: Mapped["Organization"] = relationship(back_populates="users")
    default_location: Mapped["Location | None"] = relationship(
        foreign_keys=[default_location_id]
    )
