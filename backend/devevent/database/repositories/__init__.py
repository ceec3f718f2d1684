"""MongoDB repositories."""

from devevent.database.repositories.base import BaseRepository, RepositoryError
from devevent.database.repositories.bookings import BookingRepository, DuplicateBookingError
from devevent.database.repositories.events import (
    DuplicateSlugError,
    EventRepository,
    MissingImageError,
)

__all__ = [
    "BaseRepository",
    "RepositoryError",
    "BookingRepository",
    "DuplicateBookingError",
    "EventRepository",
    "DuplicateSlugError",
    "MissingImageError",
]
