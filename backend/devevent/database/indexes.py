"""
MongoDB index definitions.

Indexes by collection:
- events: slug (unique), created_at (descending), tags
- bookings: (event_id, email) unique compound, event_id

Applied by the ConnectionManager once per successful connection.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"
BOOKINGS_COLLECTION = "bookings"


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """Create all required indexes. Idempotent."""
    events = database[EVENTS_COLLECTION]
    await events.create_index([("slug", ASCENDING)], unique=True, name="slug_unique")
    await events.create_index([("created_at", DESCENDING)], name="created_at_desc")
    await events.create_index([("tags", ASCENDING)], name="tags")

    bookings = database[BOOKINGS_COLLECTION]
    await bookings.create_index(
        [("event_id", ASCENDING), ("email", ASCENDING)],
        unique=True,
        name="event_email_unique",
    )
    await bookings.create_index([("event_id", ASCENDING)], name="event_id")

    logger.info("MongoDB indexes ensured")
