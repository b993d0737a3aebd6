"""Prayer batches router."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header
from app.core.errors import PermissionDeniedError, ValidationError
from app.schemas.auth import UserSession
from app.schemas.prayer_request import PrayerBatchCreate, PrayerBatchRead
from app.services import prayer_batch_service

router = APIRouter()


@router.post(
    "",
    response_model=PrayerBatchRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_prayer_batch(
    data: PrayerBatchCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Group prayer requests into a batch (optionally assigning them)."""
    try:
        batch = prayer_batch_service.create_prayer_batch(db, session.scope, data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return prayer_batch_service.get_prayer_batch_with_requests(
        db, session.scope, session.user_id, batch.id
    )


@router.get("/{batch_id}", response_model=PrayerBatchRead)
def get_prayer_batch(
    batch_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Batch with its requests; private requests are redacted, not hidden."""
    batch = prayer_batch_service.get_prayer_batch_with_requests(
        db, session.scope, session.user_id, batch_id
    )
    if not batch:
        raise HTTPException(status_code=404, detail="Prayer batch not found")
    return batch
