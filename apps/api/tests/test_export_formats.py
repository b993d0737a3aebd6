"""Tests for the vendor export formats."""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from app.db.enums import DataExportFormat
from app.services.export_formats import EXPORT_FORMATS, get_export_format
from app.services.export_formats import breeze, planning_center
from app.services.export_formats.base import split_name


def _card(**overrides):
    values = {
        "id": uuid.UUID("00000000-0000-0000-0000-000000000001"),
        "name": "John David Smith",
        "email": "john@example.com",
        "phone": "555-123-4567",
        "address": "1 Main St",
        "visit_type": "First Visit",
        "interests": ["Small Groups", "Kids"],
        "volunteer_category": "Hospitality",
        "status": "REVIEWED",
        "location": SimpleNamespace(name="Main Campus"),
        "scanned_at": datetime(2025, 3, 9, 14, 30, tzinfo=timezone.utc),
        "created_at": datetime(2025, 3, 9, 14, 31, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def _empty_card():
    return SimpleNamespace(
        id=None,
        name=None,
        email=None,
        phone=None,
        address=None,
        visit_type=None,
        interests=None,
        volunteer_category=None,
        status=None,
        location=None,
        scanned_at=None,
        created_at=None,
    )


def test_header_lists():
    assert get_export_format(DataExportFormat.PLANNING_CENTER_CSV).headers == [
        "First name", "Last name", "Email", "Mobile phone",
        "Home address", "Membership", "Campus", "Created at",
    ]
    assert get_export_format(DataExportFormat.BREEZE_CSV).headers == [
        "Name", "Email Address", "Mobile Phone", "Street Address",
        "Status", "Campus", "Tags", "Created On",
    ]
    assert get_export_format("GENERIC_CSV").headers == [
        "ID", "Full Name", "Email", "Phone", "Address", "Visit Type", "Interests",
        "Volunteer Category", "Location", "Status", "Scanned At", "Created At",
    ]


@pytest.mark.parametrize("export_format", list(EXPORT_FORMATS.values()), ids=lambda f: f.id)
@pytest.mark.parametrize("card", [_card(), _empty_card(), SimpleNamespace()], ids=["full", "nulls", "bare"])
def test_every_column_returns_a_string(export_format, card):
    row = export_format.row(card)

    assert len(row) == len(export_format.columns)
    assert all(isinstance(value, str) for value in row)


def test_split_name():
    assert split_name("John") == ("John", "")
    assert split_name("  John   David  Smith ") == ("John", "David Smith")
    assert split_name("") == ("", "")
    assert split_name(None) == ("", "")


@pytest.mark.parametrize(
    "raw",
    ["5551234567", "(555) 123-4567", "555.123.4567", "15551234567", "+1 555 123 4567"],
)
def test_phone_canonical_shapes(raw):
    assert planning_center.format_phone(raw) == "(555) 123-4567"
    assert breeze.format_phone(raw) == "5551234567"


@pytest.mark.parametrize("raw", ["123", "25551234567", "ext 12"])
def test_malformed_phone_passes_through(raw):
    assert planning_center.format_phone(raw) == raw
    assert breeze.format_phone(raw) == raw


def test_missing_phone_is_empty():
    assert planning_center.format_phone(None) == ""
    assert breeze.format_phone("") == ""


@pytest.mark.parametrize(
    ("visit_type", "expected"),
    [
        ("First Visit", "Visitor"),
        ("New here", "Visitor"),
        ("Second time", "Visitor"),
        ("Returning guest", "Visitor"),
        ("Regular attender", "Attendee"),
        ("Member", "Member"),
        ("Something else", "Visitor"),
        (None, "Visitor"),
    ],
)
def test_planning_center_membership(visit_type, expected):
    assert planning_center.map_membership(visit_type) == expected


def test_keyword_order_first_match_wins():
    # "new" matches before "member"
    assert planning_center.map_membership("New member") == "Visitor"
    assert breeze.map_status("Regular member") == "Attendee"


def test_planning_center_row():
    row = get_export_format(DataExportFormat.PLANNING_CENTER_CSV).row(_card())

    assert row == [
        "John", "David Smith", "john@example.com", "(555) 123-4567",
        "1 Main St", "Visitor", "Main Campus", "03/09/2025",
    ]


def test_breeze_row():
    row = get_export_format(DataExportFormat.BREEZE_CSV).row(_card(visit_type="Member"))

    assert row == [
        "John David Smith", "john@example.com", "5551234567", "1 Main St",
        "Member", "Main Campus", "Small Groups, Kids", "2025-03-09",
    ]


def test_generic_row_uses_iso_dates():
    row = get_export_format(DataExportFormat.GENERIC_CSV).row(_card())

    assert row[0] == "00000000-0000-0000-0000-000000000001"
    assert row[6] == "Small Groups, Kids"
    assert row[9] == "REVIEWED"
    assert row[10] == "2025-03-09T14:30:00.000Z"
    assert row[11] == "2025-03-09T14:31:00.000Z"


def test_naive_datetimes_are_treated_as_utc():
    row = get_export_format(DataExportFormat.GENERIC_CSV).row(
        _card(scanned_at=datetime(2025, 1, 2, 3, 4, 5))
    )

    assert row[10] == "2025-01-02T03:04:05.000Z"


def test_unknown_format_raises():
    with pytest.raises(ValueError):
        get_export_format("EXCEL")
