"""Connect cards router - uploads, review batches, card review and deletion."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_current_session, get_db, require_csrf_header
from app.core.errors import BatchContentionError, ValidationError
from app.core.rate_limit import limiter
from app.db.enums import ConnectCardStatus
from app.schemas.auth import UserSession
from app.schemas.connect_card import (
    ActiveBatchResponse,
    BatchRead,
    BatchStats,
    BatchStatusUpdate,
    ConnectCardCreate,
    ConnectCardExtraction,
    ConnectCardRead,
)
from app.services import connect_card_batch_service, connect_card_service

router = APIRouter()


# =============================================================================
# Batches
# =============================================================================


@router.post(
    "/batches/active",
    response_model=ActiveBatchResponse,
    dependencies=[Depends(require_csrf_header)],
)
def get_or_create_active_batch(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Today's upload batch for the user's campus (created on first upload)."""
    try:
        batch = connect_card_batch_service.get_or_create_active_batch(
            db, session.org_id, session.user_id
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BatchContentionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ActiveBatchResponse(
        id=batch.id,
        name=batch.name,
        location_id=batch.location_id,
        card_count=batch.card_count,
    )


@router.get("/batches", response_model=list[BatchRead])
def list_batches(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return connect_card_batch_service.get_batches_for_review(db, session.scope)


@router.get("/batches/stats", response_model=BatchStats)
def get_batch_stats(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return connect_card_batch_service.get_batch_stats(db, session.scope)


@router.post(
    "/batches/{batch_id}/status",
    response_model=BatchRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_batch_status(
    batch_id: UUID,
    data: BatchStatusUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        return connect_card_batch_service.update_batch_status(
            db, session.scope, batch_id, data.status
        )
    except LookupError:
        raise HTTPException(status_code=404, detail="Batch not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


# =============================================================================
# Cards
# =============================================================================


@router.get("", response_model=list[ConnectCardRead])
def list_cards(
    status: ConnectCardStatus | None = None,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return connect_card_service.list_connect_cards(db, session.scope, status)


@router.post(
    "",
    response_model=ConnectCardRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def upload_card(
    data: ConnectCardCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Register an uploaded card image in today's batch."""
    try:
        return connect_card_service.create_pending_card(db, session.scope, data.image_key)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BatchContentionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{card_id}", response_model=ConnectCardRead)
def get_card(
    card_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    card = connect_card_service.get_connect_card(db, session.scope, card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Connect card not found")
    return card


@router.post(
    "/{card_id}/extraction",
    response_model=ConnectCardRead,
    dependencies=[Depends(require_csrf_header)],
)
def save_extraction(
    card_id: UUID,
    data: ConnectCardExtraction,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        return connect_card_service.update_card_extraction(db, session.scope, card_id, data)
    except LookupError:
        raise HTTPException(status_code=404, detail="Connect card not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/{card_id}/review",
    response_model=ConnectCardRead,
    dependencies=[Depends(require_csrf_header)],
)
def review_card(
    card_id: UUID,
    data: ConnectCardExtraction,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        return connect_card_service.review_connect_card(
            db, session.scope, card_id, data, reviewer_id=session.user_id
        )
    except LookupError:
        raise HTTPException(status_code=404, detail="Connect card not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete(
    "/{card_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
@limiter.limit(settings.CARD_DELETE_RATE_LIMIT)
def delete_card(
    request: Request,
    card_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Remove a fake or invalid card (and its image)."""
    try:
        connect_card_service.delete_connect_card(db, session.scope, card_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Connect card not found")
