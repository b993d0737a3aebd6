"""Pydantic schemas for volunteer dual-write updates."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.db.enums import BackgroundCheckStatus, VolunteerStatus


class VolunteerStatusUpdate(BaseModel):
    """
    Partial volunteer update mirrored onto both volunteer models.

    Only explicitly provided fields are written (exclude_unset); an explicit
    None clears the field. Status, background check status, start date and
    the export flag are required columns and cannot be cleared.
    """
    status: VolunteerStatus | None = None
    background_check_status: BackgroundCheckStatus | None = None
    background_check_date: datetime | None = None
    background_check_expiry: datetime | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    inactive_reason: str | None = None
    ready_for_export: bool | None = None
    ready_for_export_date: datetime | None = None
    documents_sent_at: datetime | None = None
    notes: str | None = None

    @field_validator("status", "background_check_status", "start_date", "ready_for_export")
    @classmethod
    def reject_explicit_none(cls, v):
        # Defaults are not validated, so this only fires on an explicit null
        if v is None:
            raise ValueError("cannot be cleared")
        return v


class VolunteerCategoryUpdate(BaseModel):
    categories: list[str]
