"""Connect card batches: one PENDING batch per location per day.

Uploads from the same campus on the same day share a batch. The
get-or-create runs in its own SERIALIZABLE transaction and the partial
unique index ``uq_card_batches_one_pending_per_day`` guarantees a single
PENDING row even when two uploads race.
"""

from __future__ import annotations

import logging
import time
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import case, func, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.data_scope import DataScope, apply_location_filter
from app.core.errors import BatchContentionError, ValidationError
from app.db.enums import BatchStatus, ConnectCardStatus
from app.db.models import ConnectCard, ConnectCardBatch, User
from app.db.types import utcnow
from app.schemas.connect_card import BatchRead, BatchStats

logger = logging.getLogger(__name__)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Allowed status moves; COMPLETED is terminal
BATCH_TRANSITIONS: dict[BatchStatus, set[BatchStatus]] = {
    BatchStatus.PENDING: {BatchStatus.IN_REVIEW, BatchStatus.COMPLETED},
    BatchStatus.IN_REVIEW: {BatchStatus.PENDING, BatchStatus.COMPLETED},
    BatchStatus.COMPLETED: set(),
}


def format_batch_name(location_name: str, batch_date: date, sequence: int = 1) -> str:
    """Batch display name, e.g. "Main Campus - Jan 5, 2025" or "Main Campus - Jan 5, 2025 (2)"."""
    name = f"{location_name} - {_MONTHS[batch_date.month - 1]} {batch_date.day}, {batch_date.year}"
    if sequence > 1:
        name = f"{name} ({sequence})"
    return name


# =============================================================================
# Get-or-create
# =============================================================================


def _find_pending_batch(
    session: Session, org_id: UUID, location_id: UUID, batch_date: date
) -> ConnectCardBatch | None:
    return (
        session.query(ConnectCardBatch)
        .filter(
            ConnectCardBatch.organization_id == org_id,
            ConnectCardBatch.location_id == location_id,
            ConnectCardBatch.batch_date == batch_date,
            ConnectCardBatch.status == BatchStatus.PENDING.value,
        )
        .first()
    )


def _count_batches_for_day(
    session: Session, org_id: UUID, location_id: UUID, batch_date: date
) -> int:
    return (
        session.query(func.count(ConnectCardBatch.id))
        .filter(
            ConnectCardBatch.organization_id == org_id,
            ConnectCardBatch.location_id == location_id,
            ConnectCardBatch.batch_date == batch_date,
        )
        .scalar()
        or 0
    )


def _apply_transaction_timeouts(session: Session) -> None:
    """Bound lock waits and statement time on PostgreSQL (SQLite uses its busy timeout)."""
    if session.get_bind().dialect.name != "postgresql":
        return
    lock_ms = int(settings.BATCH_TX_MAX_WAIT_SECONDS * 1000)
    statement_ms = int(settings.BATCH_TX_TIMEOUT_SECONDS * 1000)
    connection = session.connection()
    connection.exec_driver_sql(f"SET LOCAL lock_timeout = '{lock_ms}ms'")
    connection.exec_driver_sql(f"SET LOCAL statement_timeout = '{statement_ms}ms'")


def _check_deadline(started: float) -> None:
    if time.monotonic() - started > settings.BATCH_TX_TIMEOUT_SECONDS:
        raise BatchContentionError("Batch transaction timed out; please retry the upload")


def get_or_create_active_batch(
    db: Session,
    org_id: UUID,
    user_id: UUID,
    now: datetime | None = None,
) -> ConnectCardBatch:
    """
    Return today's PENDING batch for the user's campus, creating it if needed.

    Concurrent callers for the same campus and day get the same batch. A
    caller that loses the create race re-reads once and returns the winner's
    batch. No retry loop: if the winner is still not visible, or the
    transaction exceeds its time bounds, BatchContentionError is raised.

    Raises:
        ValidationError: user has no default location
        BatchContentionError: serialization conflict or timeout
    """
    user = (
        db.query(User)
        .options(joinedload(User.default_location))
        .filter(User.id == user_id, User.organization_id == org_id)
        .first()
    )
    if not user or not user.default_location_id or not user.default_location:
        raise ValidationError("User must have a default location to upload cards")

    location_id = user.default_location_id
    location_name = user.default_location.name
    batch_date = (now or utcnow()).date()

    serializable_bind = db.get_bind().execution_options(isolation_level="SERIALIZABLE")
    started = time.monotonic()
    created = False

    try:
        with Session(bind=serializable_bind, expire_on_commit=False) as tx:
            with tx.begin():
                _apply_transaction_timeouts(tx)
                batch = _find_pending_batch(tx, org_id, location_id, batch_date)
                if batch is None:
                    sequence = _count_batches_for_day(tx, org_id, location_id, batch_date) + 1
                    batch = ConnectCardBatch(
                        organization_id=org_id,
                        location_id=location_id,
                        uploaded_by_id=user_id,
                        name=format_batch_name(location_name, batch_date, sequence),
                        batch_date=batch_date,
                        status=BatchStatus.PENDING.value,
                        card_count=0,
                    )
                    tx.add(batch)
                    tx.flush()
                    created = True
                _check_deadline(started)
            batch_id = batch.id
    except (IntegrityError, OperationalError) as exc:
        # Lost the race (unique violation or serialization failure)
        logger.info(
            "Batch get-or-create conflict; re-reading winner",
            extra={"org_id": str(org_id), "location_id": str(location_id)},
        )
        with Session(bind=db.get_bind()) as reread:
            winner = _find_pending_batch(reread, org_id, location_id, batch_date)
            if winner is None:
                raise BatchContentionError(
                    "Another upload is creating today's batch; please retry"
                ) from exc
            batch_id = winner.id

    if created:
        logger.info(
            "Connect card batch created",
            extra={"org_id": str(org_id), "batch_id": str(batch_id)},
        )
    return db.get(ConnectCardBatch, batch_id, populate_existing=True)


# =============================================================================
# Reads / updates
# =============================================================================


def get_batches_for_review(db: Session, scope: DataScope) -> list[BatchRead]:
    """Batches in scope, newest first, with the count of cards awaiting review."""
    awaiting = func.count(
        case((ConnectCard.status == ConnectCardStatus.EXTRACTED.value, ConnectCard.id))
    )
    query = (
        db.query(ConnectCardBatch, awaiting)
        .outerjoin(ConnectCard, ConnectCard.batch_id == ConnectCardBatch.id)
        .filter(ConnectCardBatch.organization_id == scope.organization_id)
    )
    query = apply_location_filter(query, ConnectCardBatch.location_id, scope)
    rows = (
        query.group_by(ConnectCardBatch.id)
        .order_by(ConnectCardBatch.created_at.desc())
        .all()
    )
    results = []
    for batch, awaiting_review in rows:
        read = BatchRead.model_validate(batch)
        read.awaiting_review = awaiting_review or 0
        results.append(read)
    return results


def get_batch_with_cards(
    db: Session, scope: DataScope, batch_id: UUID
) -> ConnectCardBatch | None:
    query = (
        db.query(ConnectCardBatch)
        .options(joinedload(ConnectCardBatch.location), joinedload(ConnectCardBatch.cards))
        .filter(
            ConnectCardBatch.id == batch_id,
            ConnectCardBatch.organization_id == scope.organization_id,
        )
    )
    return apply_location_filter(query, ConnectCardBatch.location_id, scope).first()


def update_batch_status(
    db: Session, scope: DataScope, batch_id: UUID, status: BatchStatus
) -> ConnectCardBatch:
    """
    Move a batch to a new status.

    Raises:
        LookupError: batch not in scope
        ValidationError: transition not allowed
    """
    batch = get_batch_with_cards(db, scope, batch_id)
    if not batch:
        raise LookupError("Batch not found")
    current = BatchStatus(batch.status)
    if status != current and status not in BATCH_TRANSITIONS[current]:
        raise ValidationError(f"Cannot move batch from {current.value} to {status.value}")
    batch.status = status.value
    db.commit()
    db.refresh(batch)
    return batch


def increment_batch_card_count(db: Session, batch_id: UUID) -> None:
    """Atomic card_count + 1 (does not commit)."""
    db.execute(
        update(ConnectCardBatch)
        .where(ConnectCardBatch.id == batch_id)
        .values(card_count=ConnectCardBatch.card_count + 1)
    )


def decrement_batch_card_count(db: Session, batch_id: UUID) -> None:
    """Atomic card_count - 1, never below zero (does not commit)."""
    db.execute(
        update(ConnectCardBatch)
        .where(ConnectCardBatch.id == batch_id, ConnectCardBatch.card_count > 0)
        .values(card_count=ConnectCardBatch.card_count - 1)
    )


def get_batch_stats(db: Session, scope: DataScope) -> BatchStats:
    query = db.query(ConnectCardBatch.status, func.count(ConnectCardBatch.id)).filter(
        ConnectCardBatch.organization_id == scope.organization_id
    )
    query = apply_location_filter(query, ConnectCardBatch.location_id, scope)
    counts = dict(query.group_by(ConnectCardBatch.status).all())
    pending = counts.get(BatchStatus.PENDING.value, 0)
    in_review = counts.get(BatchStatus.IN_REVIEW.value, 0)
    completed = counts.get(BatchStatus.COMPLETED.value, 0)
    return BatchStats(
        pending=pending,
        in_review=in_review,
        completed=completed,
        total=pending + in_review + completed,
    )
