"""Enum definitions for application constants."""

from app.db.enums.auth import Role
from app.db.enums.connect_cards import (
    EXPORTABLE_CARD_STATUSES,
    BatchStatus,
    ConnectCardStatus,
)
from app.db.enums.defaults import (
    DEFAULT_BACKGROUND_CHECK_STATUS,
    DEFAULT_BATCH_STATUS,
    DEFAULT_CARD_STATUS,
    DEFAULT_PRAYER_STATUS,
    DEFAULT_VOLUNTEER_STATUS,
)
from app.db.enums.exports import DataExportFormat
from app.db.enums.permissions import (
    ROLES_CAN_EXPORT,
    ROLES_CAN_MANAGE_USERS,
    ROLES_PRAYER_TEAM,
    ROLES_SEE_ALL_LOCATIONS,
)
from app.db.enums.prayer import PrayerRequestStatus
from app.db.enums.volunteers import BackgroundCheckStatus, VolunteerStatus

__all__ = [
    "BackgroundCheckStatus",
    "BatchStatus",
    "ConnectCardStatus",
    "DataExportFormat",
    "DEFAULT_BACKGROUND_CHECK_STATUS",
    "DEFAULT_BATCH_STATUS",
    "DEFAULT_CARD_STATUS",
    "DEFAULT_PRAYER_STATUS",
    "DEFAULT_VOLUNTEER_STATUS",
    "EXPORTABLE_CARD_STATUSES",
    "PrayerRequestStatus",
    "Role",
    "ROLES_CAN_EXPORT",
    "ROLES_CAN_MANAGE_USERS",
    "ROLES_PRAYER_TEAM",
    "ROLES_SEE_ALL_LOCATIONS",
    "VolunteerStatus",
]
