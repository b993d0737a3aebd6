"""Prayer batches: groups of requests handed to one prayer team member.

The batch view keeps every request in the batch and redacts submitter
identity on private requests the viewer may not see.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.core.data_scope import (
    DataScope,
    apply_location_filter,
    can_access_location,
    get_default_location_for_new_records,
)
from app.core.errors import PermissionDeniedError, ValidationError
from app.db.enums import ROLES_PRAYER_TEAM, PrayerRequestStatus
from app.db.models import PrayerBatch, PrayerRequest, User
from app.schemas.prayer_request import (
    LocationSummary,
    PrayerBatchCreate,
    PrayerBatchRead,
    PrayerRequestRead,
    UserSummary,
)
from app.services.prayer_request_service import (
    build_privacy_predicate,
    can_view_private,
    redact_prayer_request,
)

logger = logging.getLogger(__name__)

MAX_BATCH_REQUESTS = 200


def create_prayer_batch(
    db: Session,
    scope: DataScope,
    data: PrayerBatchCreate,
) -> PrayerBatch:
    """
    Group visible requests into a batch; assigning marks them ASSIGNED.

    Raises:
        ValidationError: unknown/hidden request ids, bad assignee or location
        PermissionDeniedError: staff handing private requests to someone else
    """
    location_id = data.location_id or get_default_location_for_new_records(scope)
    if location_id and not can_access_location(scope, location_id):
        raise ValidationError("You do not have access to this location")

    assignee = None
    if data.assigned_to_id:
        assignee = (
            db.query(User)
            .filter(
                User.id == data.assigned_to_id,
                User.organization_id == scope.organization_id,
                User.is_active.is_(True),
            )
            .first()
        )
        if not assignee or assignee.role not in {role.value for role in ROLES_PRAYER_TEAM}:
            raise ValidationError("Assignee must be an active prayer team member")

    request_ids = set(data.request_ids)
    query = db.query(PrayerRequest).filter(
        PrayerRequest.organization_id == scope.organization_id,
        PrayerRequest.id.in_(request_ids),
    )
    query = apply_location_filter(query, PrayerRequest.location_id, scope)
    predicate = build_privacy_predicate(scope, scope.user_id)
    if predicate is not None:
        query = query.filter(predicate)
    requests = query.all()
    if len(requests) != len(request_ids):
        raise ValidationError("One or more prayer requests were not found")
    if (
        assignee
        and assignee.id != scope.user_id
        and not scope.can_manage_users
        and any(r.is_private for r in requests)
    ):
        raise PermissionDeniedError("Only admins can assign private requests to others")

    batch = PrayerBatch(
        organization_id=scope.organization_id,
        location_id=location_id,
        name=data.name,
        assigned_to_id=assignee.id if assignee else None,
        created_by_id=scope.user_id,
    )
    db.add(batch)
    db.flush()

    for prayer_request in requests:
        prayer_request.prayer_batch_id = batch.id
        if assignee:
            prayer_request.assigned_to_id = assignee.id
            prayer_request.status = PrayerRequestStatus.ASSIGNED.value

    db.commit()
    db.refresh(batch)
    logger.info(
        "Prayer batch created",
        extra={
            "org_id": str(scope.organization_id),
            "batch_id": str(batch.id),
            "request_count": len(requests),
        },
    )
    return batch


def get_prayer_batch_with_requests(
    db: Session,
    scope: DataScope,
    user_id: UUID | None,
    batch_id: UUID,
) -> PrayerBatchRead | None:
    """Batch plus up to 200 requests (newest first), redacted per viewer."""
    query = (
        db.query(PrayerBatch)
        .options(joinedload(PrayerBatch.location), joinedload(PrayerBatch.assigned_to))
        .filter(
            PrayerBatch.id == batch_id,
            PrayerBatch.organization_id == scope.organization_id,
        )
    )
    batch = apply_location_filter(query, PrayerBatch.location_id, scope).first()
    if not batch:
        return None

    requests = (
        db.query(PrayerRequest)
        .options(joinedload(PrayerRequest.location), joinedload(PrayerRequest.assigned_to))
        .filter(
            PrayerRequest.prayer_batch_id == batch.id,
            PrayerRequest.organization_id == scope.organization_id,
        )
        .order_by(PrayerRequest.created_at.desc())
        .limit(MAX_BATCH_REQUESTS)
        .all()
    )

    items = []
    for prayer_request in requests:
        read = PrayerRequestRead.model_validate(prayer_request)
        if not can_view_private(scope, user_id, prayer_request):
            read = redact_prayer_request(read)
        items.append(read)

    return PrayerBatchRead(
        id=batch.id,
        name=batch.name,
        location_id=batch.location_id,
        location=LocationSummary.model_validate(batch.location) if batch.location else None,
        assigned_to_id=batch.assigned_to_id,
        assigned_to=UserSummary.model_validate(batch.assigned_to) if batch.assigned_to else None,
        created_at=batch.created_at,
        request_count=len(items),
        prayer_requests=items,
    )
