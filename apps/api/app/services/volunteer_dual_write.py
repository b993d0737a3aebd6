"""Dual-write shim for volunteer data.

Volunteer fields are being migrated from the legacy ``Volunteer`` model onto
``ChurchMember``. Until reads move over, every volunteer write goes to both
models in the caller's transaction. These helpers flush but never commit.

Enum values differ: Volunteer stores ``VolunteerStatus`` / ``BackgroundCheckStatus``
names, ChurchMember stores lowercase strings.
"""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.db.enums import BackgroundCheckStatus, VolunteerStatus
from app.db.models import ChurchMember, Volunteer, VolunteerCategory
from app.db.types import utcnow
from app.schemas.volunteer import VolunteerStatusUpdate

logger = logging.getLogger(__name__)

VOLUNTEER_STATUS_TO_STRING: dict[VolunteerStatus, str] = {
    VolunteerStatus.ACTIVE: "active",
    VolunteerStatus.INACTIVE: "inactive",
    VolunteerStatus.ON_BREAK: "on_break",
    VolunteerStatus.PENDING_APPROVAL: "pending",
}

BG_CHECK_STATUS_TO_STRING: dict[BackgroundCheckStatus, str] = {
    status: status.value.lower() for status in BackgroundCheckStatus
}

# Volunteer attribute -> ChurchMember attribute (same value on both)
_MIRRORED_FIELDS = {
    "background_check_date": "background_check_date",
    "background_check_expiry": "background_check_expiry",
    "start_date": "volunteer_start_date",
    "end_date": "volunteer_end_date",
    "inactive_reason": "volunteer_inactive_reason",
    "ready_for_export": "ready_for_export",
    "ready_for_export_date": "ready_for_export_date",
    "documents_sent_at": "documents_sent_at",
    "notes": "volunteer_notes",
}


def _load_pair(
    db: Session, volunteer_id: UUID, church_member_id: UUID
) -> tuple[Volunteer, ChurchMember]:
    volunteer = db.get(Volunteer, volunteer_id)
    member = db.get(ChurchMember, church_member_id)
    if not volunteer or not member:
        raise ValidationError("Volunteer or church member not found")
    if volunteer.church_member_id != member.id:
        raise ValidationError("Volunteer does not belong to this church member")
    return volunteer, member


def dual_write_volunteer_status(
    db: Session,
    volunteer_id: UUID,
    church_member_id: UUID,
    update: VolunteerStatusUpdate,
) -> None:
    """Write only the provided fields to both models; the member is always flagged a volunteer."""
    volunteer, member = _load_pair(db, volunteer_id, church_member_id)
    changes = update.model_dump(exclude_unset=True)

    if "status" in changes:
        status = VolunteerStatus(changes.pop("status"))
        volunteer.status = status.value
        member.volunteer_status = VOLUNTEER_STATUS_TO_STRING[status]
    if "background_check_status" in changes:
        bg_status = BackgroundCheckStatus(changes.pop("background_check_status"))
        volunteer.background_check_status = bg_status.value
        member.background_check_status = BG_CHECK_STATUS_TO_STRING[bg_status]

    for field, value in changes.items():
        setattr(volunteer, field, value)
        setattr(member, _MIRRORED_FIELDS[field], value)

    member.is_volunteer = True
    db.flush()


def dual_write_volunteer_categories(
    db: Session,
    volunteer_id: UUID,
    church_member_id: UUID,
    org_id: UUID,
    categories: list[str],
) -> None:
    """Replace the volunteer's categories on both models."""
    volunteer, member = _load_pair(db, volunteer_id, church_member_id)
    unique_categories = list(dict.fromkeys(categories))

    db.execute(delete(VolunteerCategory).where(VolunteerCategory.volunteer_id == volunteer.id))
    db.add_all(
        VolunteerCategory(organization_id=org_id, volunteer_id=volunteer.id, category=category)
        for category in unique_categories
    )
    member.volunteer_categories = unique_categories
    db.flush()
    db.expire(volunteer, ["categories"])


def dual_write_ready_for_export(
    db: Session, volunteer_id: UUID, church_member_id: UUID, now: datetime | None = None
) -> None:
    dual_write_volunteer_status(
        db,
        volunteer_id,
        church_member_id,
        VolunteerStatusUpdate(ready_for_export=True, ready_for_export_date=now or utcnow()),
    )


def dual_write_documents_sent(
    db: Session, volunteer_id: UUID, church_member_id: UUID, now: datetime | None = None
) -> None:
    dual_write_volunteer_status(
        db,
        volunteer_id,
        church_member_id,
        VolunteerStatusUpdate(documents_sent_at=now or utcnow()),
    )


def ensure_is_volunteer_flag(db: Session, church_member_id: UUID) -> None:
    member = db.get(ChurchMember, church_member_id)
    if not member:
        raise ValidationError("Church member not found")
    member.is_volunteer = True
    db.flush()


def sync_volunteer_to_church_member(db: Session, volunteer_id: UUID) -> None:
    """Copy every volunteer field onto the linked ChurchMember (repairs drift)."""
    volunteer = db.get(Volunteer, volunteer_id)
    if not volunteer:
        raise ValidationError(f"Volunteer not found: {volunteer_id}")
    member = volunteer.church_member

    member.is_volunteer = True
    member.volunteer_status = VOLUNTEER_STATUS_TO_STRING[VolunteerStatus(volunteer.status)]
    member.background_check_status = BG_CHECK_STATUS_TO_STRING[
        BackgroundCheckStatus(volunteer.background_check_status)
    ]
    member.volunteer_categories = [c.category for c in volunteer.categories]
    member.emergency_contact_name = volunteer.emergency_contact_name
    member.emergency_contact_phone = volunteer.emergency_contact_phone
    for field, member_field in _MIRRORED_FIELDS.items():
        setattr(member, member_field, getattr(volunteer, field))
    db.flush()
    logger.info(
        "Synced volunteer to church member",
        extra={"volunteer_id": str(volunteer.id), "church_member_id": str(member.id)},
    )
