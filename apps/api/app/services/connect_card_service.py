"""Connect card lifecycle: upload, OCR extraction, staff review, deletion."""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.core.data_scope import DataScope, apply_location_filter
from app.core.errors import ValidationError
from app.db.enums import ConnectCardStatus
from app.db.models import ConnectCard
from app.db.types import utcnow
from app.schemas.connect_card import ConnectCardExtraction
from app.services import connect_card_batch_service, prayer_request_service, storage_service

logger = logging.getLogger(__name__)

# Target status -> statuses a card may move from
CARD_TRANSITIONS: dict[ConnectCardStatus, set[ConnectCardStatus]] = {
    ConnectCardStatus.EXTRACTED: {ConnectCardStatus.PENDING, ConnectCardStatus.EXTRACTED},
    ConnectCardStatus.REVIEWED: {ConnectCardStatus.EXTRACTED, ConnectCardStatus.REVIEWED},
    ConnectCardStatus.PROCESSED: {ConnectCardStatus.REVIEWED},
}


def _require_transition(card: ConnectCard, target: ConnectCardStatus) -> None:
    current = ConnectCardStatus(card.status)
    if current not in CARD_TRANSITIONS[target]:
        raise ValidationError(f"Cannot move card from {current.value} to {target.value}")


def _apply_extraction(card: ConnectCard, data: ConnectCardExtraction) -> None:
    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "interests":
            value = value or []
        setattr(card, field, value)


def get_connect_card(db: Session, scope: DataScope, card_id: UUID) -> ConnectCard | None:
    """Card in the caller's org and location scope, else None."""
    query = (
        db.query(ConnectCard)
        .options(joinedload(ConnectCard.location))
        .filter(
            ConnectCard.id == card_id,
            ConnectCard.organization_id == scope.organization_id,
        )
    )
    return apply_location_filter(query, ConnectCard.location_id, scope).first()


def list_connect_cards(
    db: Session,
    scope: DataScope,
    status: ConnectCardStatus | None = None,
    limit: int = 100,
) -> list[ConnectCard]:
    query = (
        db.query(ConnectCard)
        .options(joinedload(ConnectCard.location))
        .filter(ConnectCard.organization_id == scope.organization_id)
    )
    query = apply_location_filter(query, ConnectCard.location_id, scope)
    if status:
        query = query.filter(ConnectCard.status == status.value)
    limit = max(1, min(limit, 500))
    return query.order_by(ConnectCard.scanned_at.desc()).limit(limit).all()


def create_pending_card(
    db: Session,
    scope: DataScope,
    image_key: str,
    now: datetime | None = None,
) -> ConnectCard:
    """
    Register an uploaded card image in today's batch for the uploader's campus.

    Raises:
        ValidationError: uploader has no default location
        BatchContentionError: batch creation conflict (caller retries)
    """
    batch = connect_card_batch_service.get_or_create_active_batch(
        db, scope.organization_id, scope.user_id, now=now
    )
    card = ConnectCard(
        organization_id=scope.organization_id,
        location_id=batch.location_id,
        batch_id=batch.id,
        image_key=image_key,
        interests=[],
        status=ConnectCardStatus.PENDING.value,
        scanned_at=now or utcnow(),
        scanned_by_id=scope.user_id,
    )
    db.add(card)
    connect_card_batch_service.increment_batch_card_count(db, batch.id)
    db.commit()
    db.refresh(card)
    logger.info(
        "Connect card uploaded",
        extra={
            "org_id": str(scope.organization_id),
            "card_id": str(card.id),
            "batch_id": str(batch.id),
        },
    )
    return card


def update_card_extraction(
    db: Session,
    scope: DataScope,
    card_id: UUID,
    data: ConnectCardExtraction,
) -> ConnectCard:
    """Store OCR output and mark the card EXTRACTED."""
    card = get_connect_card(db, scope, card_id)
    if not card:
        raise LookupError("Connect card not found")
    _require_transition(card, ConnectCardStatus.EXTRACTED)
    _apply_extraction(card, data)
    card.status = ConnectCardStatus.EXTRACTED.value
    db.commit()
    db.refresh(card)
    return card


def review_connect_card(
    db: Session,
    scope: DataScope,
    card_id: UUID,
    data: ConnectCardExtraction,
    reviewer_id: UUID | None,
    now: datetime | None = None,
) -> ConnectCard:
    """
    Apply staff corrections and mark the card REVIEWED.

    A non-empty prayer request on first review spawns a PrayerRequest.
    """
    card = get_connect_card(db, scope, card_id)
    if not card:
        raise LookupError("Connect card not found")
    _require_transition(card, ConnectCardStatus.REVIEWED)
    first_review = card.status != ConnectCardStatus.REVIEWED.value

    _apply_extraction(card, data)
    card.status = ConnectCardStatus.REVIEWED.value
    card.reviewed_at = now or utcnow()
    card.reviewed_by_id = reviewer_id

    prayer_text = (card.prayer_request or "").strip()
    if first_review and prayer_text:
        prayer_request_service.create_prayer_request_from_connect_card(db, card, prayer_text)

    db.commit()
    db.refresh(card)
    return card


def mark_card_processed(db: Session, scope: DataScope, card_id: UUID) -> ConnectCard:
    card = get_connect_card(db, scope, card_id)
    if not card:
        raise LookupError("Connect card not found")
    _require_transition(card, ConnectCardStatus.PROCESSED)
    card.status = ConnectCardStatus.PROCESSED.value
    db.commit()
    db.refresh(card)
    return card


def delete_connect_card(db: Session, scope: DataScope, card_id: UUID) -> None:
    """
    Delete a fake or invalid card and its uploaded image.

    The image delete runs after the commit and is best-effort: a storage
    failure is logged and leaves an orphaned object, never a dangling row.

    Raises:
        LookupError: card not found or outside the caller's scope
    """
    card = get_connect_card(db, scope, card_id)
    if not card:
        raise LookupError("Connect card not found")
    image_key = card.image_key
    batch_id = card.batch_id

    db.delete(card)
    if batch_id:
        connect_card_batch_service.decrement_batch_card_count(db, batch_id)
    db.commit()

    image_deleted = bool(image_key) and storage_service.delete_object(image_key)
    logger.info(
        "Connect card deleted",
        extra={
            "org_id": str(scope.organization_id),
            "card_id": str(card_id),
            "image_deleted": image_deleted,
        },
    )
