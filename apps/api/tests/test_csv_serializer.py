"""Tests for CSV serialization of connect card exports."""

from datetime import date, datetime, timezone
from types import SimpleNamespace
import uuid

import pytest

from app.db.enums import DataExportFormat
from app.services import export_service


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("plain", "plain"),
        ("O'Brien", "O'Brien"),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("line1\nline2", '"line1\nline2"'),
        ("cr\rhere", '"cr\rhere"'),
        ("ends\r\n", '"ends\r\n"'),
        ("", ""),
        (None, ""),
        ("=SUM(A1)", "=SUM(A1)"),
    ],
)
def test_escape_csv_field(value, expected):
    assert export_service.escape_csv_field(value) == expected


def _card(name, email):
    return SimpleNamespace(
        id=uuid.uuid4(),
        name=name,
        email=email,
        phone=None,
        address=None,
        visit_type=None,
        interests=[],
        volunteer_category=None,
        status="REVIEWED",
        location=None,
        scanned_at=datetime(2025, 5, 1, tzinfo=timezone.utc),
        created_at=datetime(2025, 5, 1, tzinfo=timezone.utc),
    )


def test_generic_export_quotes_name_with_comma():
    cards = [_card("O'Brien, Sean", "sean@test.com"), _card("Jane Doe", "jane@test.com")]

    csv_content = export_service.generate_csv(cards, DataExportFormat.GENERIC_CSV)
    lines = csv_content.split("\n")

    assert len(lines) == 3
    assert lines[0].startswith("ID,Full Name,Email,")
    assert f'{cards[0].id},"O\'Brien, Sean",sean@test.com,' in lines[1]
    assert f"{cards[1].id},Jane Doe,jane@test.com," in lines[2]


def test_generate_csv_has_no_trailing_newline_and_keeps_order():
    cards = [_card("Zed", "z@test.com"), _card("Amy", "a@test.com")]

    csv_content = export_service.generate_csv(cards, DataExportFormat.BREEZE_CSV)

    assert not csv_content.endswith("\n")
    rows = csv_content.split("\n")
    assert rows[1].startswith("Zed,")
    assert rows[2].startswith("Amy,")


def test_generate_csv_is_deterministic():
    cards = [_card("Amy", "a@test.com")]

    first = export_service.generate_csv(cards, DataExportFormat.PLANNING_CENTER_CSV)
    second = export_service.generate_csv(cards, DataExportFormat.PLANNING_CENTER_CSV)

    assert first == second


def test_generate_csv_with_no_records_is_header_only():
    csv_content = export_service.generate_csv([], DataExportFormat.PLANNING_CENTER_CSV)

    assert csv_content == (
        "First name,Last name,Email,Mobile phone,Home address,Membership,Campus,Created at"
    )


@pytest.mark.parametrize(
    ("export_format", "expected"),
    [
        (DataExportFormat.PLANNING_CENTER_CSV, "connect-cards-planning-center-2025-06-01.csv"),
        (DataExportFormat.BREEZE_CSV, "connect-cards-breeze-2025-06-01.csv"),
        (DataExportFormat.GENERIC_CSV, "connect-cards-generic-2025-06-01.csv"),
    ],
)
def test_generate_export_filename(export_format, expected):
    assert export_service.generate_export_filename(export_format, date(2025, 6, 1)) == expected


def test_csv_byte_size_counts_utf8_bytes():
    assert export_service.get_csv_byte_size("José") == 5


def test_preview_rows_default_limit():
    cards = [_card(f"Person {i}", f"p{i}@test.com") for i in range(8)]

    rows = export_service.get_preview_rows(cards, DataExportFormat.GENERIC_CSV)

    assert len(rows) == 5
    assert rows[0][1] == "Person 0"
    assert export_service.get_format_headers(DataExportFormat.GENERIC_CSV)[1] == "Full Name"
