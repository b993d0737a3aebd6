"""SQLAlchemy ORM models."""

from app.db.models.auth import Location, Organization, User
from app.db.models.connect_cards import ConnectCard, ConnectCardBatch
from app.db.models.exports import DataExport
from app.db.models.members import ChurchMember, Volunteer, VolunteerCategory
from app.db.models.prayer import PrayerBatch, PrayerRequest

__all__ = [
    "ChurchMember",
    "ConnectCard",
    "ConnectCardBatch",
    "DataExport",
    "Location",
    "Organization",
    "PrayerBatch",
    "PrayerRequest",
    "User",
    "Volunteer",
    "VolunteerCategory",
]
