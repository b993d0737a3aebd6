"""Location scoping - which campuses a staff member's queries may touch.

Every list/detail query filters by organization_id first; the location
filter computed here narrows it further:
- Owners and multi-campus users: every location (empty filter)
- Everyone else: their default location only
- Restricted users with no default location: nothing (fail closed)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import false

from app.db.enums import ROLES_CAN_MANAGE_USERS, ROLES_SEE_ALL_LOCATIONS, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataScope:
    """Resolved visibility context for the current staff member."""

    organization_id: UUID
    user_id: UUID | None
    role: Role
    can_see_all_locations: bool
    location_id: UUID | None = None
    can_manage_users: bool = False


@dataclass(frozen=True)
class LocationFilter:
    """
    Location restriction to apply to a query.

    - empty (location_id=None, deny_all=False): no restriction
    - location_id set: rows at that location only
    - deny_all: no rows at all
    """

    location_id: UUID | None = None
    deny_all: bool = False

    @property
    def is_empty(self) -> bool:
        return self.location_id is None and not self.deny_all


def build_data_scope(user) -> DataScope:
    """Build a DataScope from a User row."""
    role = Role(user.role) if not isinstance(user.role, Role) else user.role
    return DataScope(
        organization_id=user.organization_id,
        user_id=user.id,
        role=role,
        can_see_all_locations=bool(user.can_see_all_locations)
        or role in ROLES_SEE_ALL_LOCATIONS,
        location_id=user.default_location_id,
        can_manage_users=role in ROLES_CAN_MANAGE_USERS,
    )


def get_location_filter(scope: DataScope) -> LocationFilter:
    """
    Compute the location restriction for a scope.

    A restricted scope without an assigned location gets a deny-all filter
    rather than an unrestricted one.
    """
    if scope.can_see_all_locations:
        return LocationFilter()

    if scope.location_id:
        return LocationFilter(location_id=scope.location_id)

    logger.warning(
        "Restricted user without default location; denying all location-scoped rows",
        extra={"user_id": str(scope.user_id), "org_id": str(scope.organization_id)},
    )
    return LocationFilter(deny_all=True)


def apply_location_filter(query, location_column, scope: DataScope):
    """Apply the scope's location restriction to a SQLAlchemy query."""
    location_filter = get_location_filter(scope)
    if location_filter.deny_all:
        return query.filter(false())
    if location_filter.location_id is not None:
        return query.filter(location_column == location_filter.location_id)
    return query


def can_access_location(scope: DataScope, location_id: UUID | None) -> bool:
    """
    Check if the scope may access a specific location.

    Restricted scopes match by equality, so a NULL target matches a scope
    with no assigned location.
    """
    if scope.can_see_all_locations:
        return True
    return scope.location_id == location_id


def get_default_location_for_new_records(scope: DataScope) -> UUID | None:
    """
    Location to stamp on records the user creates.

    Staff default to their campus; owners/admins must choose (None).
    """
    if not scope.can_see_all_locations and scope.location_id:
        return scope.location_id
    return None
