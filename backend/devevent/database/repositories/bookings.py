"""
BookingRepository

MongoDB operations for the 'bookings' collection.
"""

import logging
from datetime import datetime, timezone

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from devevent.database.indexes import BOOKINGS_COLLECTION
from devevent.database.repositories.base import BaseRepository, RepositoryError
from devevent.models import Booking, Event

logger = logging.getLogger(__name__)


class DuplicateBookingError(RepositoryError):
    """The email is already booked for the event."""

    pass


class BookingRepository(BaseRepository):
    """Bookings keyed by (event, email)."""

    collection_name = BOOKINGS_COLLECTION

    async def create(self, event: Event, email: str) -> Booking:
        document = {
            "event_id": ObjectId(event.id),
            "slug": event.slug,
            "email": email,
            "created_at": datetime.now(timezone.utc),
        }

        collection = await self.collection()
        try:
            result = await collection.insert_one(document)
        except DuplicateKeyError as e:
            raise DuplicateBookingError(
                f"{email} has already booked '{event.slug}'"
            ) from e

        document["_id"] = result.inserted_id
        logger.info(f"Created booking for '{event.slug}'")
        return Booking.model_validate(document)

    async def count_for_event(self, event: Event) -> int:
        collection = await self.collection()
        return await collection.count_documents({"event_id": ObjectId(event.id)})
