"""Tests for connect card upload and review."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from app.core.data_scope import build_data_scope
from app.core.errors import ValidationError
from app.db.enums import ConnectCardStatus, Role
from app.db.models import ConnectCardBatch, PrayerRequest
from app.schemas.connect_card import ConnectCardExtraction
from app.services import connect_card_batch_service, connect_card_service

NOW = datetime(2025, 2, 2, 10, 0, tzinfo=timezone.utc)


def test_upload_adds_card_to_active_batch(db, staff_user, main_campus):
    scope = build_data_scope(staff_user)

    first = connect_card_service.create_pending_card(db, scope, "org/cards/1.jpg", now=NOW)
    second = connect_card_service.create_pending_card(db, scope, "org/cards/2.jpg", now=NOW)

    assert first.batch_id == second.batch_id
    assert first.location_id == main_campus.id
    assert first.status == ConnectCardStatus.PENDING.value
    batch = db.get(ConnectCardBatch, first.batch_id)
    db.refresh(batch)
    assert batch.card_count == 2


def test_review_spawns_prayer_request(db, staff_user):
    scope = build_data_scope(staff_user)
    card = connect_card_service.create_pending_card(db, scope, "org/cards/1.jpg", now=NOW)
    connect_card_service.update_card_extraction(
        db, scope, card.id, ConnectCardExtraction(name="Ana Lopez", email="ana@test.com")
    )

    reviewed = connect_card_service.review_connect_card(
        db,
        scope,
        card.id,
        ConnectCardExtraction(prayer_request="Please pray, my divorce is final"),
        reviewer_id=staff_user.id,
    )

    assert reviewed.status == ConnectCardStatus.REVIEWED.value
    assert reviewed.name == "Ana Lopez"
    prayer = db.query(PrayerRequest).filter(PrayerRequest.connect_card_id == card.id).one()
    assert prayer.is_private is True
    assert prayer.submitted_by == "Ana Lopez"
    assert prayer.location_id == card.location_id


def test_re_review_does_not_duplicate_prayer_request(db, staff_user):
    scope = build_data_scope(staff_user)
    card = connect_card_service.create_pending_card(db, scope, "k", now=NOW)
    connect_card_service.update_card_extraction(db, scope, card.id, ConnectCardExtraction(prayer_request="Healing"))
    connect_card_service.review_connect_card(db, scope, card.id, ConnectCardExtraction(), reviewer_id=staff_user.id)
    connect_card_service.review_connect_card(db, scope, card.id, ConnectCardExtraction(), reviewer_id=staff_user.id)

    assert db.query(PrayerRequest).filter(PrayerRequest.connect_card_id == card.id).count() == 1


def test_cannot_review_pending_card(db, staff_user):
    scope = build_data_scope(staff_user)
    card = connect_card_service.create_pending_card(db, scope, "k", now=NOW)

    with pytest.raises(ValidationError):
        connect_card_service.review_connect_card(db, scope, card.id, ConnectCardExtraction(), reviewer_id=None)


def test_card_outside_scope_is_hidden(db, staff_user, make_user, north_campus):
    card = connect_card_service.create_pending_card(db, build_data_scope(staff_user), "k", now=NOW)
    north_user = make_user(Role.STAFF, location=north_campus)

    assert connect_card_service.get_connect_card(db, build_data_scope(north_user), card.id) is None
    with pytest.raises(LookupError):
        connect_card_service.update_card_extraction(
            db, build_data_scope(north_user), card.id, ConnectCardExtraction()
        )


def test_mark_processed_after_review(db, staff_user):
    scope = build_data_scope(staff_user)
    card = connect_card_service.create_pending_card(db, scope, "k", now=NOW)

    with pytest.raises(ValidationError):
        connect_card_service.mark_card_processed(db, scope, card.id)

    connect_card_service.update_card_extraction(db, scope, card.id, ConnectCardExtraction(name="Ana"))
    connect_card_service.review_connect_card(db, scope, card.id, ConnectCardExtraction(), reviewer_id=staff_user.id)
    processed = connect_card_service.mark_card_processed(db, scope, card.id)

    assert processed.status == ConnectCardStatus.PROCESSED.value


def test_batch_with_cards_is_scoped(db, staff_user, make_user, north_campus):
    card = connect_card_service.create_pending_card(db, build_data_scope(staff_user), "k", now=NOW)
    north_user = make_user(Role.STAFF, location=north_campus)

    batch = connect_card_batch_service.get_batch_with_cards(db, build_data_scope(staff_user), card.batch_id)
    hidden = connect_card_batch_service.get_batch_with_cards(db, build_data_scope(north_user), card.batch_id)

    assert [c.id for c in batch.cards] == [card.id]
    assert hidden is None


def test_delete_card_removes_row_and_image(db, staff_user):
    scope = build_data_scope(staff_user)
    card = connect_card_service.create_pending_card(db, scope, "org/cards/fake.jpg", now=NOW)
    keeper = connect_card_service.create_pending_card(db, scope, "org/cards/real.jpg", now=NOW)
    card_id, batch_id = card.id, card.batch_id

    with patch(
        "app.services.connect_card_service.storage_service.delete_object", return_value=True
    ) as mock_delete:
        connect_card_service.delete_connect_card(db, scope, card_id)

    mock_delete.assert_called_once_with("org/cards/fake.jpg")
    assert connect_card_service.get_connect_card(db, scope, card_id) is None
    assert connect_card_service.get_connect_card(db, scope, keeper.id) is not None
    batch = db.get(ConnectCardBatch, batch_id)
    db.refresh(batch)
    assert batch.card_count == 1


def test_delete_card_survives_storage_failure(db, staff_user):
    scope = build_data_scope(staff_user)
    card = connect_card_service.create_pending_card(db, scope, "org/cards/fake.jpg", now=NOW)
    card_id = card.id

    with patch(
        "app.services.connect_card_service.storage_service.delete_object", return_value=False
    ):
        connect_card_service.delete_connect_card(db, scope, card_id)

    assert connect_card_service.get_connect_card(db, scope, card_id) is None


def test_delete_card_outside_scope(db, staff_user, make_user, north_campus):
    card = connect_card_service.create_pending_card(db, build_data_scope(staff_user), "k", now=NOW)
    north_user = make_user(Role.STAFF, location=north_campus)

    with patch("app.services.connect_card_service.storage_service.delete_object") as mock_delete:
        with pytest.raises(LookupError):
            connect_card_service.delete_connect_card(db, build_data_scope(north_user), card.id)

    mock_delete.assert_not_called()
