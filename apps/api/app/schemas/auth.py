"""Session context schema."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.data_scope import DataScope
from app.db.enums import Role


class UserSession(BaseModel):
    """
    The signed-in staff member, as seen by routers.

    Returned by the get_current_session dependency. ``scope`` carries the
    church and campus visibility every service query is filtered by.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    user_id: UUID
    org_id: UUID
    role: Role
    email: str
    display_name: str
    scope: DataScope
