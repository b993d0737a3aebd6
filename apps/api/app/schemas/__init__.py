"""Pydantic schemas for API request/response models."""

from app.schemas.auth import UserSession
from app.schemas.connect_card import (
    ActiveBatchResponse,
    BatchRead,
    BatchStats,
    BatchStatusUpdate,
    ConnectCardCreate,
    ConnectCardExtraction,
    ConnectCardRead,
)
from app.schemas.export import (
    DataExportRead,
    ExportFilters,
    ExportFormatInfo,
    ExportPreview,
    ExportRequest,
    ExportResult,
)
from app.schemas.prayer_request import (
    PrayerBatchCreate,
    PrayerBatchRead,
    PrayerRequestAssign,
    PrayerRequestCreate,
    PrayerRequestFilters,
    PrayerRequestListResponse,
    PrayerRequestPrivacyUpdate,
    PrayerRequestRead,
    PrayerRequestStats,
    PrayerRequestStatusUpdate,
)
from app.schemas.volunteer import VolunteerCategoryUpdate, VolunteerStatusUpdate

__all__ = [
    # Auth
    "UserSession",
    # Connect cards
    "ActiveBatchResponse",
    "BatchRead",
    "BatchStats",
    "BatchStatusUpdate",
    "ConnectCardCreate",
    "ConnectCardExtraction",
    "ConnectCardRead",
    # Exports
    "DataExportRead",
    "ExportFilters",
    "ExportFormatInfo",
    "ExportPreview",
    "ExportRequest",
    "ExportResult",
    # Prayer
    "PrayerBatchCreate",
    "PrayerBatchRead",
    "PrayerRequestAssign",
    "PrayerRequestCreate",
    "PrayerRequestFilters",
    "PrayerRequestListResponse",
    "PrayerRequestPrivacyUpdate",
    "PrayerRequestRead",
    "PrayerRequestStats",
    "PrayerRequestStatusUpdate",
    # Volunteers
    "VolunteerCategoryUpdate",
    "VolunteerStatusUpdate",
]
