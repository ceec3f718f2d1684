"""
Database module initialization.
Exports database components for use throughout the application.
"""

from devevent.database.connection import (
    ConnectionClosedError,
    ConnectionManager,
    ConnectionState,
    sanitize_mongodb_url,
)
from devevent.database.indexes import (
    BOOKINGS_COLLECTION,
    EVENTS_COLLECTION,
    ensure_indexes,
)
from devevent.database.repositories import (
    BookingRepository,
    DuplicateBookingError,
    DuplicateSlugError,
    EventRepository,
    MissingImageError,
    RepositoryError,
)

__all__ = [
    # Connection management
    "ConnectionClosedError",
    "ConnectionManager",
    "ConnectionState",
    "ensure_indexes",
    "EVENTS_COLLECTION",
    "BOOKINGS_COLLECTION",
    # Repositories
    "EventRepository",
    "BookingRepository",
    # Errors
    "RepositoryError",
    "DuplicateSlugError",
    "DuplicateBookingError",
    "MissingImageError",
    # Utilities
    "sanitize_mongodb_url",
]
