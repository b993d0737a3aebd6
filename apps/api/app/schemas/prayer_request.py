"""Pydantic schemas for prayer requests and prayer batches."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import PrayerRequestStatus


class PrayerRequestFilters(BaseModel):
    """Optional filters for listing prayer requests."""
    status: PrayerRequestStatus | None = None
    category: str | None = None
    location_id: UUID | None = None
    assigned_to_id: UUID | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    search: str | None = Field(None, max_length=200)
    is_private: bool | None = None
    page: int = 1
    limit: int = 50


class PrayerRequestCreate(BaseModel):
    """Request to create a prayer request manually."""
    request: str = Field(..., min_length=1, max_length=5000)
    category: str | None = Field(None, max_length=50)
    submitted_by: str | None = Field(None, max_length=255)
    submitter_email: str | None = Field(None, max_length=255)
    submitter_phone: str | None = Field(None, max_length=50)
    location_id: UUID | None = None
    is_private: bool | None = None  # None = auto-detect from text
    is_urgent: bool = False


class PrayerRequestAssign(BaseModel):
    assigned_to_id: UUID


class PrayerRequestPrivacyUpdate(BaseModel):
    is_private: bool


class PrayerRequestStatusUpdate(BaseModel):
    status: PrayerRequestStatus


class UserSummary(BaseModel):
    id: UUID
    name: str
    email: str

    model_config = {"from_attributes": True}


class LocationSummary(BaseModel):
    id: UUID
    name: str
    slug: str

    model_config = {"from_attributes": True}


class PrayerRequestRead(BaseModel):
    """Prayer request response (submitter fields may be redacted)."""
    id: UUID
    request: str
    category: str | None
    submitted_by: str | None
    submitter_email: str | None
    submitter_phone: str | None
    is_private: bool
    is_urgent: bool
    status: PrayerRequestStatus
    location_id: UUID | None
    location: LocationSummary | None = None
    connect_card_id: UUID | None
    prayer_batch_id: UUID | None
    assigned_to_id: UUID | None
    assigned_to: UserSummary | None = None
    answered_date: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PrayerRequestListResponse(BaseModel):
    items: list[PrayerRequestRead]
    total: int
    page: int
    limit: int
    total_pages: int


class PrayerRequestStats(BaseModel):
    total: int
    pending: int
    assigned: int
    praying: int
    answered: int
    archived: int
    private: int
    urgent: int
    this_week: int
    answered_this_month: int


class PrayerBatchCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    request_ids: list[UUID] = Field(..., min_length=1, max_length=200)
    assigned_to_id: UUID | None = None
    location_id: UUID | None = None


class PrayerBatchRead(BaseModel):
    id: UUID
    name: str
    location_id: UUID | None
    location: LocationSummary | None = None
    assigned_to_id: UUID | None
    assigned_to: UserSummary | None = None
    created_at: datetime
    request_count: int
    prayer_requests: list[PrayerRequestRead]
