"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    Staff roles within an organization.

    - OWNER: Account owner (billing, every location, team management)
    - ADMIN: Church admin (team management, exports, private prayer requests)
    - STAFF: Location staff (restricted to their default location unless
      granted multi-location access)
    """

    OWNER = "owner"
    ADMIN = "admin"
    STAFF = "staff"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_
