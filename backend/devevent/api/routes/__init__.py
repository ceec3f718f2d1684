"""API routes module."""

from devevent.api.routes.bookings import router as bookings_router
from devevent.api.routes.events import router as events_router

__all__ = [
    "bookings_router",
    "events_router",
]
