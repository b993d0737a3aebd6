"""Pydantic schemas for connect card exports."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from app.db.enums import DataExportFormat


class ExportFilters(BaseModel):
    """Which connect cards to export."""
    location_id: UUID | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    only_new: bool = False


class ExportRequest(BaseModel):
    format: DataExportFormat
    filters: ExportFilters = ExportFilters()


class ExportFormatInfo(BaseModel):
    id: str
    format: DataExportFormat
    name: str
    description: str
    headers: list[str]


class ExportPreview(BaseModel):
    format: DataExportFormat
    headers: list[str]
    rows: list[list[str]]
    total_count: int


class ExportResult(BaseModel):
    export_id: UUID
    file_name: str
    record_count: int
    file_key: str


class DataExportRead(BaseModel):
    id: UUID
    format: DataExportFormat
    filters: dict
    record_count: int
    file_name: str
    file_size_bytes: int
    exported_by_id: UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}
