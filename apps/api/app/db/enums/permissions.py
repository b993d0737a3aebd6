"""Role permission helper sets."""

from app.db.enums.auth import Role

# Roles that can manage team members (also unlocks private prayer requests)
ROLES_CAN_MANAGE_USERS = {Role.OWNER, Role.ADMIN}

# Roles that always see every location in the organization
ROLES_SEE_ALL_LOCATIONS = {Role.OWNER}

# Roles that can export connect cards to third-party systems
ROLES_CAN_EXPORT = {Role.OWNER, Role.ADMIN}

# Roles that can be assigned prayer requests
ROLES_PRAYER_TEAM = {Role.ADMIN, Role.STAFF}
