"""Service layer modules."""

# Import service modules (not individual functions) for cleaner access
from app.services import storage_client
from app.services import storage_service
from app.services import prayer_request_service
from app.services import prayer_batch_service
from app.services import connect_card_batch_service
from app.services import connect_card_service
from app.services import export_service
from app.services import volunteer_dual_write

__all__ = [
    "storage_client",
    "storage_service",
    "prayer_request_service",
    "prayer_batch_service",
    "connect_card_batch_service",
    "connect_card_service",
    "export_service",
    "volunteer_dual_write",
]
