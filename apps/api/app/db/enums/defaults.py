"""Centralized defaults for enums."""

from app.db.enums.connect_cards import BatchStatus, ConnectCardStatus
from app.db.enums.prayer import PrayerRequestStatus
from app.db.enums.volunteers import BackgroundCheckStatus, VolunteerStatus


DEFAULT_CARD_STATUS: ConnectCardStatus = ConnectCardStatus.PENDING
DEFAULT_BATCH_STATUS: BatchStatus = BatchStatus.PENDING
DEFAULT_PRAYER_STATUS: PrayerRequestStatus = PrayerRequestStatus.PENDING
DEFAULT_VOLUNTEER_STATUS: VolunteerStatus = VolunteerStatus.PENDING_APPROVAL
DEFAULT_BACKGROUND_CHECK_STATUS: BackgroundCheckStatus = BackgroundCheckStatus.NOT_STARTED
