"""Prayer request service: privacy-aware listing and lifecycle operations.

Privacy policy:
- Owners/admins see every request in their location scope.
- Staff see public requests plus private requests assigned to them.
- Private requests a viewer cannot see are excluded from lists and stats and
  reported as absent on single fetch. Only the batch view redacts instead
  (see prayer_batch_service).
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import and_, false, func, or_
from sqlalchemy.orm import Session, joinedload

from app.core.data_scope import (
    DataScope,
    apply_location_filter,
    can_access_location,
    get_default_location_for_new_records,
)
from app.core.errors import PermissionDeniedError, ValidationError
from app.db.enums import ROLES_PRAYER_TEAM, PrayerRequestStatus
from app.db.models import ConnectCard, PrayerRequest, User
from app.schemas.prayer_request import (
    PrayerRequestCreate,
    PrayerRequestFilters,
    PrayerRequestListResponse,
    PrayerRequestRead,
    PrayerRequestStats,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MAX_LIMIT = 100

SENSITIVE_KEYWORDS = (
    "confidential",
    "private",
    "don't share",
    "dont share",
    "between us",
    "secret",
    "personal",
    "sensitive",
    "abuse",
    "addiction",
    "affair",
    "divorce",
    "depression",
    "suicide",
    "mental health",
    "legal",
    "court",
)

# Checked in order; first category with a matching keyword wins
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Health",
        (
            "surgery", "doctor", "hospital", "cancer", "disease", "illness",
            "sick", "pain", "healing", "health", "medical", "treatment",
            "diagnosis", "recovery", "chronic", "mental health", "depression",
            "anxiety", "addiction",
        ),
    ),
    (
        "Salvation",
        (
            "salvation", "saved", "accept christ", "accept jesus", "gospel",
            "born again", "unsaved", "non-believer", "doesn't know jesus",
            "doesnt know jesus", "not a christian", "come to christ",
            "come to faith",
        ),
    ),
    (
        "Family",
        (
            "child", "children", "kids", "son", "daughter", "parent", "mother",
            "father", "mom", "dad", "family", "marriage", "husband", "wife",
            "spouse", "sibling", "brother", "sister", "grandparent",
            "grandmother", "grandfather",
        ),
    ),
    (
        "Financial",
        (
            "financial", "money", "job", "employment", "laid off", "unemployed",
            "debt", "bills", "provision", "finances", "income", "paycheck",
        ),
    ),
    (
        "Work/Career",
        (
            "work", "career", "job search", "interview", "business",
            "promotion", "coworker", "workplace", "boss",
        ),
    ),
    (
        "Relationships",
        (
            "relationship", "dating", "boyfriend", "girlfriend", "fiance",
            "engaged", "marriage counseling", "separation", "divorce",
            "affair", "friendship",
        ),
    ),
    (
        "Spiritual Growth",
        (
            "faith", "doubt", "spiritual", "bible study", "prayer", "worship",
            "ministry", "calling", "purpose", "discipleship", "grow",
            "closer to god",
        ),
    ),
)


# =============================================================================
# Text classification
# =============================================================================


def has_sensitive_keywords(request_text: str | None) -> bool:
    """True when the text suggests the request should be private."""
    if not request_text:
        return False
    lower_text = request_text.lower()
    return any(keyword in lower_text for keyword in SENSITIVE_KEYWORDS)


def detect_prayer_category(request_text: str | None) -> str | None:
    if not request_text:
        return None
    lower_text = request_text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lower_text for keyword in keywords):
            return category
    return None


# =============================================================================
# Privacy
# =============================================================================


def build_privacy_predicate(
    scope: DataScope,
    user_id: UUID | None,
    is_private: bool | None = None,
):
    """
    SQL clause restricting prayer requests to what the viewer may see.

    Returns None when no restriction applies.
    """
    if scope.can_manage_users:
        if is_private is None:
            return None
        return PrayerRequest.is_private.is_(is_private)

    if is_private is True:
        # Staff asking for private requests only get their own assignments
        if user_id is None:
            return false()
        return and_(PrayerRequest.is_private.is_(True), PrayerRequest.assigned_to_id == user_id)

    if is_private is False or user_id is None:
        return PrayerRequest.is_private.is_(False)

    return or_(PrayerRequest.is_private.is_(False), PrayerRequest.assigned_to_id == user_id)


def can_view_private(scope: DataScope, user_id: UUID | None, prayer_request: PrayerRequest) -> bool:
    if not prayer_request.is_private:
        return True
    if scope.can_manage_users:
        return True
    return user_id is not None and prayer_request.assigned_to_id == user_id


def redact_prayer_request(read: PrayerRequestRead) -> PrayerRequestRead:
    """Copy with submitter identity removed."""
    return read.model_copy(
        update={"submitted_by": None, "submitter_email": None, "submitter_phone": None}
    )


def _scoped_query(db: Session, scope: DataScope, user_id: UUID | None, is_private: bool | None = None):
    query = db.query(PrayerRequest).filter(
        PrayerRequest.organization_id == scope.organization_id
    )
    query = apply_location_filter(query, PrayerRequest.location_id, scope)
    predicate = build_privacy_predicate(scope, user_id, is_private)
    if predicate is not None:
        query = query.filter(predicate)
    return query


# =============================================================================
# Reads
# =============================================================================


def list_prayer_requests(
    db: Session,
    scope: DataScope,
    user_id: UUID | None,
    filters: PrayerRequestFilters,
) -> PrayerRequestListResponse:
    """List prayer requests visible to the viewer, urgent first then newest."""
    page = max(1, filters.page)
    limit = max(1, min(filters.limit or DEFAULT_LIMIT, MAX_LIMIT))

    query = _scoped_query(db, scope, user_id, filters.is_private)

    if filters.location_id:
        if not can_access_location(scope, filters.location_id):
            query = query.filter(false())
        else:
            query = query.filter(PrayerRequest.location_id == filters.location_id)
    if filters.status:
        query = query.filter(PrayerRequest.status == filters.status.value)
    if filters.category:
        query = query.filter(PrayerRequest.category == filters.category)
    if filters.assigned_to_id:
        query = query.filter(PrayerRequest.assigned_to_id == filters.assigned_to_id)
    if filters.date_from:
        query = query.filter(PrayerRequest.created_at >= filters.date_from)
    if filters.date_to:
        query = query.filter(PrayerRequest.created_at <= filters.date_to)
    if filters.search:
        pattern = f"%{filters.search.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(PrayerRequest.request).like(pattern),
                func.lower(PrayerRequest.submitted_by).like(pattern),
            )
        )

    total = query.count()
    items = (
        query.options(
            joinedload(PrayerRequest.location),
            joinedload(PrayerRequest.assigned_to),
        )
        .order_by(
            PrayerRequest.is_urgent.desc(),
            PrayerRequest.status.asc(),
            PrayerRequest.created_at.desc(),
        )
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PrayerRequestListResponse(
        items=[PrayerRequestRead.model_validate(item) for item in items],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
    )


def get_prayer_request(
    db: Session,
    scope: DataScope,
    user_id: UUID | None,
    request_id: UUID,
) -> PrayerRequest | None:
    """
    Fetch one request, or None.

    Hidden private requests return None exactly like missing ones.
    """
    return (
        _scoped_query(db, scope, user_id)
        .options(
            joinedload(PrayerRequest.location),
            joinedload(PrayerRequest.assigned_to),
        )
        .filter(PrayerRequest.id == request_id)
        .first()
    )


def get_prayer_request_stats(
    db: Session,
    scope: DataScope,
    user_id: UUID | None,
    now: datetime | None = None,
) -> PrayerRequestStats:
    now = now or datetime.now(timezone.utc)
    week_ago = now - timedelta(days=7)
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    base = _scoped_query(db, scope, user_id)

    status_counts = dict(
        base.with_entities(PrayerRequest.status, func.count(PrayerRequest.id))
        .group_by(PrayerRequest.status)
        .all()
    )

    def _count(*criteria) -> int:
        return base.filter(*criteria).count()

    return PrayerRequestStats(
        total=sum(status_counts.values()),
        pending=status_counts.get(PrayerRequestStatus.PENDING.value, 0),
        assigned=status_counts.get(PrayerRequestStatus.ASSIGNED.value, 0),
        praying=status_counts.get(PrayerRequestStatus.PRAYING.value, 0),
        answered=status_counts.get(PrayerRequestStatus.ANSWERED.value, 0),
        archived=status_counts.get(PrayerRequestStatus.ARCHIVED.value, 0),
        private=_count(PrayerRequest.is_private.is_(True)),
        urgent=_count(PrayerRequest.is_urgent.is_(True)),
        this_week=_count(PrayerRequest.created_at >= week_ago),
        answered_this_month=_count(
            PrayerRequest.status == PrayerRequestStatus.ANSWERED.value,
            PrayerRequest.answered_date >= month_start,
        ),
    )


def get_prayer_team_members(
    db: Session, org_id: UUID, location_id: UUID | None = None
) -> list[User]:
    """Admins and staff who can be assigned prayer requests."""
    query = db.query(User).filter(
        User.organization_id == org_id,
        User.is_active.is_(True),
        User.role.in_([role.value for role in ROLES_PRAYER_TEAM]),
    )
    if location_id:
        query = query.filter(User.default_location_id == location_id)
    return query.order_by(User.name.asc()).limit(100).all()


# =============================================================================
# Writes
# =============================================================================


def create_prayer_request_from_connect_card(
    db: Session,
    card: ConnectCard,
    request_text: str,
) -> PrayerRequest:
    """
    Spawn a prayer request from a reviewed card.

    Privacy and category are inferred from the text.
    """
    prayer_request = PrayerRequest(
        organization_id=card.organization_id,
        location_id=card.location_id,
        connect_card_id=card.id,
        request=request_text,
        category=detect_prayer_category(request_text),
        submitted_by=card.name or None,
        submitter_email=card.email or None,
        submitter_phone=card.phone or None,
        status=PrayerRequestStatus.PENDING.value,
        is_private=has_sensitive_keywords(request_text),
    )
    db.add(prayer_request)
    db.flush()
    logger.info(
        "Prayer request created from connect card",
        extra={
            "org_id": str(card.organization_id),
            "prayer_request_id": str(prayer_request.id),
            "is_private": prayer_request.is_private,
        },
    )
    return prayer_request


def create_prayer_request(
    db: Session,
    scope: DataScope,
    data: PrayerRequestCreate,
) -> PrayerRequest:
    location_id = data.location_id or get_default_location_for_new_records(scope)
    if location_id and not can_access_location(scope, location_id):
        raise ValidationError("You do not have access to this location")

    is_private = data.is_private
    if is_private is None:
        is_private = has_sensitive_keywords(data.request)

    prayer_request = PrayerRequest(
        organization_id=scope.organization_id,
        location_id=location_id,
        request=data.request,
        category=data.category or detect_prayer_category(data.request),
        submitted_by=data.submitted_by,
        submitter_email=data.submitter_email,
        submitter_phone=data.submitter_phone,
        is_private=is_private,
        is_urgent=data.is_urgent,
        status=PrayerRequestStatus.PENDING.value,
    )
    db.add(prayer_request)
    db.commit()
    db.refresh(prayer_request)
    return prayer_request


def _get_for_update(
    db: Session, scope: DataScope, user_id: UUID | None, request_id: UUID
) -> PrayerRequest:
    prayer_request = get_prayer_request(db, scope, user_id, request_id)
    if not prayer_request:
        raise LookupError("Prayer request not found")
    return prayer_request


def _require_manager(scope: DataScope, action: str) -> None:
    if not scope.can_manage_users:
        raise PermissionDeniedError(f"Only admins and owners can {action}")


def assign_prayer_request(
    db: Session,
    scope: DataScope,
    user_id: UUID | None,
    request_id: UUID,
    assignee_id: UUID,
) -> PrayerRequest:
    """
    Assign a request to a prayer team member.

    Staff may assign a private request only to themselves.

    Raises:
        LookupError: request not visible to the caller
        ValidationError: assignee is not an active team member of this org
        PermissionDeniedError: staff handing a private request to someone else
    """
    prayer_request = _get_for_update(db, scope, user_id, request_id)
    if (
        prayer_request.is_private
        and not scope.can_manage_users
        and assignee_id != user_id
    ):
        raise PermissionDeniedError("Only admins can assign private requests to others")
    assignee = (
        db.query(User)
        .filter(
            User.id == assignee_id,
            User.organization_id == scope.organization_id,
            User.is_active.is_(True),
        )
        .first()
    )
    if not assignee or assignee.role not in {role.value for role in ROLES_PRAYER_TEAM}:
        raise ValidationError("Assignee must be an active prayer team member")

    prayer_request.assigned_to_id = assignee.id
    if prayer_request.status == PrayerRequestStatus.PENDING.value:
        prayer_request.status = PrayerRequestStatus.ASSIGNED.value
    db.commit()
    db.refresh(prayer_request)
    return prayer_request


def update_prayer_request_status(
    db: Session,
    scope: DataScope,
    user_id: UUID | None,
    request_id: UUID,
    status: PrayerRequestStatus,
    now: datetime | None = None,
) -> PrayerRequest:
    prayer_request = _get_for_update(db, scope, user_id, request_id)
    prayer_request.status = status.value
    if status == PrayerRequestStatus.ANSWERED:
        prayer_request.answered_date = now or datetime.now(timezone.utc)
    else:
        prayer_request.answered_date = None
    db.commit()
    db.refresh(prayer_request)
    return prayer_request


def mark_prayer_request_answered(
    db: Session,
    scope: DataScope,
    user_id: UUID | None,
    request_id: UUID,
    now: datetime | None = None,
) -> PrayerRequest:
    return update_prayer_request_status(
        db, scope, user_id, request_id, PrayerRequestStatus.ANSWERED, now=now
    )


def toggle_prayer_request_privacy(
    db: Session,
    scope: DataScope,
    user_id: UUID | None,
    request_id: UUID,
    is_private: bool,
) -> PrayerRequest:
    prayer_request = _get_for_update(db, scope, user_id, request_id)
    _require_manager(scope, "change prayer request privacy")
    prayer_request.is_private = is_private
    db.commit()
    db.refresh(prayer_request)
    return prayer_request


def delete_prayer_request(
    db: Session,
    scope: DataScope,
    user_id: UUID | None,
    request_id: UUID,
) -> None:
    prayer_request = _get_for_update(db, scope, user_id, request_id)
    _require_manager(scope, "delete prayer requests")
    db.delete(prayer_request)
    db.commit()
