"""Pydantic schemas for connect cards and upload batches."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from app.db.enums import BatchStatus, ConnectCardStatus


class ConnectCardExtraction(BaseModel):
    """Fields produced by OCR (or corrected by a reviewer)."""
    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=1000)
    visit_type: str | None = Field(None, max_length=100)
    interests: list[str] = Field(default_factory=list)
    volunteer_category: str | None = Field(None, max_length=100)
    prayer_request: str | None = Field(None, max_length=5000)


class ConnectCardCreate(BaseModel):
    image_key: str = Field(..., min_length=1, max_length=500)


class ConnectCardRead(BaseModel):
    id: UUID
    location_id: UUID | None
    batch_id: UUID | None
    image_key: str | None
    name: str | None
    email: str | None
    phone: str | None
    address: str | None
    visit_type: str | None
    interests: list[str]
    volunteer_category: str | None
    prayer_request: str | None
    status: ConnectCardStatus
    scanned_at: datetime
    reviewed_at: datetime | None
    last_exported_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def image_url(self) -> str | None:
        """Displayable image path; demo placeholders map to static assets."""
        # Import here to avoid circular imports
        from app.services.storage_service import resolve_asset_url

        return resolve_asset_url(self.image_key)


class ActiveBatchResponse(BaseModel):
    id: UUID
    name: str
    location_id: UUID | None
    card_count: int


class BatchRead(BaseModel):
    id: UUID
    name: str
    location_id: UUID
    batch_date: date
    status: BatchStatus
    card_count: int
    awaiting_review: int = 0
    created_at: datetime

    model_config = {"from_attributes": True}


class BatchStatusUpdate(BaseModel):
    status: BatchStatus


class BatchStats(BaseModel):
    pending: int
    in_review: int
    completed: int
    total: int
