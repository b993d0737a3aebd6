"""Prayer request enums."""

from enum import Enum


class PrayerRequestStatus(str, Enum):
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    PRAYING = "PRAYING"
    ANSWERED = "ANSWERED"
    ARCHIVED = "ARCHIVED"
