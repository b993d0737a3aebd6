"""Volunteer enums (legacy Volunteer model)."""

from enum import Enum


class VolunteerStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_BREAK = "ON_BREAK"
    PENDING_APPROVAL = "PENDING_APPROVAL"


class BackgroundCheckStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    PENDING_REVIEW = "PENDING_REVIEW"
    CLEARED = "CLEARED"
    FLAGGED = "FLAGGED"
    EXPIRED = "EXPIRED"
