"""Tests for the export pipeline (storage is mocked)."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from app.core.data_scope import build_data_scope
from app.core.errors import ExportError, ValidationError
from app.db.enums import ConnectCardStatus, DataExportFormat, Role
from app.db.models import ConnectCard, DataExport
from app.schemas.export import ExportFilters
from app.services import export_service

NOW = datetime(2025, 4, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def cards(db, test_org, main_campus, north_campus):
    def _card(name, status=ConnectCardStatus.REVIEWED, location=main_campus, days_ago=0, **kwargs):
        card = ConnectCard(
            organization_id=test_org.id,
            location_id=location.id,
            name=name,
            email=f"{name.split()[0].lower()}@test.com",
            status=status.value,
            scanned_at=NOW - timedelta(days=days_ago),
            **kwargs,
        )
        db.add(card)
        return card

    items = {
        "reviewed": _card("Amy Adams"),
        "extracted": _card("Ben Brown", status=ConnectCardStatus.EXTRACTED, days_ago=1),
        "pending": _card("Cat Cole", status=ConnectCardStatus.PENDING),
        "north": _card("Dan Diaz", location=north_campus, days_ago=2),
        "old": _card("Eve Evans", days_ago=30),
        "exported": _card("Fay Fox", last_exported_at=NOW - timedelta(days=3)),
    }
    db.commit()
    return items


def test_query_excludes_pending_and_respects_scope(db, admin_user, owner_user, cards):
    admin_ids = {c.id for c in export_service.build_export_query(db, build_data_scope(admin_user), ExportFilters()).all()}
    owner_ids = {c.id for c in export_service.build_export_query(db, build_data_scope(owner_user), ExportFilters()).all()}

    assert cards["pending"].id not in owner_ids
    assert cards["north"].id in owner_ids
    assert cards["north"].id not in admin_ids
    assert len(owner_ids) == 5


def test_query_filters(db, owner_user, main_campus, cards):
    scope = build_data_scope(owner_user)

    only_new = export_service.build_export_query(db, scope, ExportFilters(only_new=True)).all()
    recent = export_service.build_export_query(
        db, scope, ExportFilters(date_from=NOW - timedelta(days=7), date_to=NOW)
    ).all()
    main_only = export_service.build_export_query(db, scope, ExportFilters(location_id=main_campus.id)).all()

    assert cards["exported"].id not in {c.id for c in only_new}
    assert cards["old"].id not in {c.id for c in recent}
    assert all(c.location_id == main_campus.id for c in main_only)


def test_query_rejects_inaccessible_location(db, admin_user, north_campus, cards):
    with pytest.raises(ValidationError):
        export_service.build_export_query(
            db, build_data_scope(admin_user), ExportFilters(location_id=north_campus.id)
        )


def test_preview(db, owner_user, cards):
    preview = export_service.get_export_preview(
        db, build_data_scope(owner_user), DataExportFormat.BREEZE_CSV, ExportFilters()
    )

    assert preview.total_count == 5
    assert len(preview.rows) == 5
    assert preview.headers[0] == "Name"


def test_create_export_uploads_and_stamps_cards(db, test_org, owner_user, cards):
    scope = build_data_scope(owner_user)

    with patch("app.services.export_service.storage_service.put_object") as mock_put:
        result = export_service.create_export(
            db, scope, DataExportFormat.PLANNING_CENTER_CSV, ExportFilters(only_new=True), now=NOW
        )

    assert result.record_count == 4
    assert result.file_name == "connect-cards-planning-center-2025-04-20.csv"
    assert result.file_key == f"exports/{test_org.slug}/{result.file_name}"

    key, body = mock_put.call_args.args
    assert key == result.file_key
    assert body.decode("utf-8").startswith("First name,Last name,")
    assert mock_put.call_args.kwargs["content_type"] == "text/csv"

    export = db.get(DataExport, result.export_id)
    assert export.format == DataExportFormat.PLANNING_CENTER_CSV.value
    assert export.file_size_bytes == len(body)
    assert export.filters == {"only_new": True}
    assert export.exported_by_id == owner_user.id

    db.refresh(cards["reviewed"])
    assert cards["reviewed"].last_export_format == "planning_center"
    assert cards["reviewed"].last_exported_by_id == owner_user.id
    assert cards["reviewed"].last_exported_at is not None


def test_create_export_with_no_matches(db, owner_user, cards):
    scope = build_data_scope(owner_user)
    future = NOW + timedelta(days=365)

    with patch("app.services.export_service.storage_service.put_object") as mock_put:
        with pytest.raises(ExportError, match="No records match your filter criteria"):
            export_service.create_export(
                db, scope, DataExportFormat.GENERIC_CSV, ExportFilters(date_from=future)
            )

    mock_put.assert_not_called()


def test_staff_cannot_export(db, staff_user, cards):
    with pytest.raises(ExportError):
        export_service.create_export(
            db, build_data_scope(staff_user), DataExportFormat.GENERIC_CSV, ExportFilters()
        )


def test_history_and_download(db, test_org, owner_user, cards):
    scope = build_data_scope(owner_user)
    with patch("app.services.export_service.storage_service.put_object"):
        result = export_service.create_export(db, scope, DataExportFormat.GENERIC_CSV, ExportFilters(), now=NOW)

    history = export_service.get_export_history(db, test_org.id)
    with patch(
        "app.services.export_service.storage_service.get_object_bytes",
        return_value=b"ID,Full Name",
    ) as mock_get:
        file_name, content = export_service.get_export_download(db, test_org.id, result.export_id)

    assert [e.id for e in history] == [result.export_id]
    assert file_name == result.file_name
    assert content == b"ID,Full Name"
    assert mock_get.call_args.args[0] == result.file_key


def test_list_export_formats():
    formats = export_service.list_export_formats()

    assert [f["id"] for f in formats] == ["planning_center", "breeze", "generic"]
