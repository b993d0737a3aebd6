"""Prayer requests router - privacy-filtered prayer list and lifecycle."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header
from app.core.errors import PermissionDeniedError, ValidationError
from app.db.enums import PrayerRequestStatus
from app.schemas.auth import UserSession
from app.schemas.prayer_request import (
    PrayerRequestAssign,
    PrayerRequestCreate,
    PrayerRequestFilters,
    PrayerRequestListResponse,
    PrayerRequestPrivacyUpdate,
    PrayerRequestRead,
    PrayerRequestStats,
    PrayerRequestStatusUpdate,
    UserSummary,
)
from app.services import prayer_request_service

router = APIRouter()


@router.get("", response_model=PrayerRequestListResponse)
def list_prayer_requests(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    status: PrayerRequestStatus | None = None,
    category: str | None = None,
    location_id: UUID | None = None,
    assigned_to_id: UUID | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    search: str | None = Query(None, max_length=200),
    is_private: bool | None = None,
):
    """List prayer requests visible to the current user."""
    filters = PrayerRequestFilters(
        status=status,
        category=category,
        location_id=location_id,
        assigned_to_id=assigned_to_id,
        date_from=date_from,
        date_to=date_to,
        search=search,
        is_private=is_private,
        page=page,
        limit=limit,
    )
    return prayer_request_service.list_prayer_requests(db, session.scope, session.user_id, filters)


@router.get("/stats", response_model=PrayerRequestStats)
def get_prayer_request_stats(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return prayer_request_service.get_prayer_request_stats(db, session.scope, session.user_id)


@router.get("/team", response_model=list[UserSummary])
def list_prayer_team(
    location_id: UUID | None = None,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Users who can be assigned prayer requests."""
    return prayer_request_service.get_prayer_team_members(db, session.org_id, location_id)


@router.get("/{request_id}", response_model=PrayerRequestRead)
def get_prayer_request(
    request_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Hidden private requests 404 like missing ones."""
    prayer_request = prayer_request_service.get_prayer_request(
        db, session.scope, session.user_id, request_id
    )
    if not prayer_request:
        raise HTTPException(status_code=404, detail="Prayer request not found")
    return prayer_request


@router.post(
    "",
    response_model=PrayerRequestRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_prayer_request(
    data: PrayerRequestCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        return prayer_request_service.create_prayer_request(db, session.scope, data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/{request_id}/assign",
    response_model=PrayerRequestRead,
    dependencies=[Depends(require_csrf_header)],
)
def assign_prayer_request(
    request_id: UUID,
    data: PrayerRequestAssign,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        return prayer_request_service.assign_prayer_request(
            db, session.scope, session.user_id, request_id, data.assigned_to_id
        )
    except LookupError:
        raise HTTPException(status_code=404, detail="Prayer request not found")
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/{request_id}/answered",
    response_model=PrayerRequestRead,
    dependencies=[Depends(require_csrf_header)],
)
def mark_answered(
    request_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        return prayer_request_service.mark_prayer_request_answered(
            db, session.scope, session.user_id, request_id
        )
    except LookupError:
        raise HTTPException(status_code=404, detail="Prayer request not found")


@router.post(
    "/{request_id}/status",
    response_model=PrayerRequestRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_status(
    request_id: UUID,
    data: PrayerRequestStatusUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        return prayer_request_service.update_prayer_request_status(
            db, session.scope, session.user_id, request_id, data.status
        )
    except LookupError:
        raise HTTPException(status_code=404, detail="Prayer request not found")


@router.post(
    "/{request_id}/privacy",
    response_model=PrayerRequestRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_privacy(
    request_id: UUID,
    data: PrayerRequestPrivacyUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        return prayer_request_service.toggle_prayer_request_privacy(
            db, session.scope, session.user_id, request_id, data.is_private
        )
    except LookupError:
        raise HTTPException(status_code=404, detail="Prayer request not found")
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.delete(
    "/{request_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_prayer_request(
    request_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        prayer_request_service.delete_prayer_request(db, session.scope, session.user_id, request_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Prayer request not found")
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
