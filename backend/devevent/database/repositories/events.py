"""
EventRepository

MongoDB operations for the 'events' collection.

Methods:
- find_by_slug(slug): Exact lookup on the unique slug, None when absent
- list_all(): All events, newest first
- create(fields): Insert a new event after the image upload
- find_similar(slug, limit): Other events sharing at least one tag
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from devevent.database.indexes import EVENTS_COLLECTION
from devevent.database.repositories.base import BaseRepository, RepositoryError
from devevent.models import Event, EventCreate

logger = logging.getLogger(__name__)


def parse_events(documents: list[dict]) -> list[Event]:
    """Validate stored documents, skipping any that cannot be read as events."""
    events = []
    for document in documents:
        try:
            events.append(Event.model_validate(document))
        except ValidationError as e:
            logger.warning(f"Skipping unreadable event {document.get('_id')}: {e}")
    return events


class MissingImageError(RepositoryError):
    """Event creation attempted without an uploaded image URL."""

    pass


class DuplicateSlugError(RepositoryError):
    """An event with the same slug already exists."""

    def __init__(self, slug: str):
        super().__init__(f"Event with slug '{slug}' already exists")
        self.slug = slug


class EventRepository(BaseRepository):
    """Event persistence on top of the shared connection."""

    collection_name = EVENTS_COLLECTION

    async def find_by_slug(self, slug: str) -> Optional[Event]:
        collection = await self.collection()
        document = await collection.find_one({"slug": slug})
        if document is None:
            return None
        return Event.model_validate(document)

    async def list_all(self) -> list[Event]:
        collection = await self.collection()
        cursor = collection.find({}).sort("created_at", DESCENDING)
        documents = await cursor.to_list(length=None)
        return parse_events(documents)

    async def create(self, fields: EventCreate) -> Event:
        """
        Persist a new event.

        Raises:
            MissingImageError: no image URL was supplied
            DuplicateSlugError: the slug is already taken
        """
        if not fields.image:
            raise MissingImageError("Image URL is required to create an event")

        now = datetime.now(timezone.utc)
        document = fields.model_dump()
        document["created_at"] = now
        document["updated_at"] = now

        collection = await self.collection()
        try:
            result = await collection.insert_one(document)
        except DuplicateKeyError as e:
            raise DuplicateSlugError(fields.slug) from e

        document["_id"] = result.inserted_id
        logger.info(f"Created event '{fields.slug}' ({result.inserted_id})")
        return Event.model_validate(document)

    async def find_similar(self, slug: str, limit: int = 3) -> list[Event]:
        """Events sharing a tag with the given one, excluding itself."""
        event = await self.find_by_slug(slug)
        if event is None or not event.tags:
            return []

        collection = await self.collection()
        cursor = (
            collection.find({"slug": {"$ne": slug}, "tags": {"$in": event.tags}})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )
        documents = await cursor.to_list(length=limit)
        return parse_events(documents)
