"""Breeze ChMS people import format."""

from app.services.export_formats.base import (
    ExportColumn,
    ExportFormat,
    format_date,
    interests,
    location_name,
    match_keywords,
    phone_digits,
    text,
)

STATUS_RULES = (
    (("first", "new"), "Visitor"),
    (("regular", "attend"), "Attendee"),
    (("member",), "Member"),
)


def format_phone(phone: str | None) -> str:
    """Bare 10 digits (a leading country code 1 is dropped); anything else unchanged."""
    if not phone:
        return ""
    digits = phone_digits(phone)
    if len(digits) == 10:
        return digits
    if len(digits) == 11 and digits.startswith("1"):
        return digits[1:]
    return phone


def map_status(visit_type: str | None) -> str:
    return match_keywords(visit_type, STATUS_RULES, "Visitor")


BREEZE_FORMAT = ExportFormat(
    id="breeze",
    name="Breeze",
    description="Ready for People > Import in Breeze ChMS",
    columns=(
        ExportColumn("Name", lambda c: text(c, "name")),
        ExportColumn("Email Address", lambda c: text(c, "email")),
        ExportColumn("Mobile Phone", lambda c: format_phone(text(c, "phone"))),
        ExportColumn("Street Address", lambda c: text(c, "address")),
        ExportColumn("Status", lambda c: map_status(text(c, "visit_type"))),
        ExportColumn("Campus", location_name),
        ExportColumn("Tags", lambda c: ", ".join(interests(c))),
        ExportColumn(
            "Created On",
            lambda c: format_date(getattr(c, "scanned_at", None), "%Y-%m-%d"),
        ),
    ),
)
