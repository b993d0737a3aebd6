"""Planning Center People import format.

Headers match Planning Center's import template (People > Import).
"""

from app.services.export_formats.base import (
    ExportColumn,
    ExportFormat,
    format_date,
    location_name,
    match_keywords,
    phone_digits,
    split_name,
    text,
)

MEMBERSHIP_RULES = (
    (("first", "new"), "Visitor"),
    (("second", "return"), "Visitor"),
    (("regular", "attend"), "Attendee"),
    (("member",), "Member"),
)


def format_phone(phone: str | None) -> str:
    """(NNN) NNN-NNNN for 10 digits or 11 starting with 1; anything else unchanged."""
    if not phone:
        return ""
    digits = phone_digits(phone)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    elif len(digits) != 10:
        return phone
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def map_membership(visit_type: str | None) -> str:
    return match_keywords(visit_type, MEMBERSHIP_RULES, "Visitor")


PLANNING_CENTER_FORMAT = ExportFormat(
    id="planning_center",
    name="Planning Center",
    description="Ready for People > Import in Planning Center Online",
    columns=(
        ExportColumn("First name", lambda c: split_name(text(c, "name"))[0]),
        ExportColumn("Last name", lambda c: split_name(text(c, "name"))[1]),
        ExportColumn("Email", lambda c: text(c, "email")),
        ExportColumn("Mobile phone", lambda c: format_phone(text(c, "phone"))),
        ExportColumn("Home address", lambda c: text(c, "address")),
        ExportColumn("Membership", lambda c: map_membership(text(c, "visit_type"))),
        ExportColumn("Campus", location_name),
        ExportColumn(
            "Created at",
            lambda c: format_date(getattr(c, "scanned_at", None), "%m/%d/%Y"),
        ),
    ),
)
