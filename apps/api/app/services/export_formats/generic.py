"""Generic CSV format: every field, readable headers, ISO-8601 timestamps."""

from datetime import date, datetime

from app.services.export_formats.base import (
    ExportColumn,
    ExportFormat,
    as_utc,
    interests,
    location_name,
    text,
)


def format_iso(value: date | datetime | None) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return value.isoformat()


GENERIC_FORMAT = ExportFormat(
    id="generic",
    name="Generic CSV",
    description="All fields with standard column names; works with any system",
    columns=(
        ExportColumn("ID", lambda c: text(c, "id")),
        ExportColumn("Full Name", lambda c: text(c, "name")),
        ExportColumn("Email", lambda c: text(c, "email")),
        ExportColumn("Phone", lambda c: text(c, "phone")),
        ExportColumn("Address", lambda c: text(c, "address")),
        ExportColumn("Visit Type", lambda c: text(c, "visit_type")),
        ExportColumn("Interests", lambda c: ", ".join(interests(c))),
        ExportColumn("Volunteer Category", lambda c: text(c, "volunteer_category")),
        ExportColumn("Location", location_name),
        ExportColumn("Status", lambda c: text(c, "status")),
        ExportColumn("Scanned At", lambda c: format_iso(getattr(c, "scanned_at", None))),
        ExportColumn("Created At", lambda c: format_iso(getattr(c, "created_at", None))),
    ),
)
