"""API routers."""

from app.routers.connect_cards import router as connect_cards_router
from app.routers.exports import router as exports_router
from app.routers.prayer_batches import router as prayer_batches_router
from app.routers.prayer_requests import router as prayer_requests_router

__all__ = [
    "connect_cards_router",
    "exports_router",
    "prayer_batches_router",
    "prayer_requests_router",
]
