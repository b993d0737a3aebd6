"""Connect card enums."""

from enum import Enum


class ConnectCardStatus(str, Enum):
    """
    Connect card lifecycle.

    PENDING (uploaded) -> EXTRACTED (OCR done) -> REVIEWED (staff approved).
    PROCESSED marks cards already pushed to a downstream system.
    """

    PENDING = "PENDING"
    EXTRACTED = "EXTRACTED"
    REVIEWED = "REVIEWED"
    PROCESSED = "PROCESSED"


class BatchStatus(str, Enum):
    """Connect card batch lifecycle."""

    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    COMPLETED = "COMPLETED"


# Cards in these states are eligible for export
EXPORTABLE_CARD_STATUSES = (
    ConnectCardStatus.EXTRACTED,
    ConnectCardStatus.REVIEWED,
    ConnectCardStatus.PROCESSED,
)
