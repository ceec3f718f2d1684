"""
BaseRepository

Base class for MongoDB repositories. Every operation first obtains the shared
database handle from the ConnectionManager, then works on its collection.

Subclasses set collection_name and add specialized queries.
"""

from motor.motor_asyncio import AsyncIOMotorCollection

from devevent.database.connection import ConnectionManager


class RepositoryError(Exception):
    """Base exception for repository operations."""

    pass


class BaseRepository:
    """Common plumbing for collection-backed repositories."""

    collection_name: str = ""

    def __init__(self, connections: ConnectionManager):
        self.connections = connections

    async def collection(self) -> AsyncIOMotorCollection:
        database = await self.connections.acquire()
        return database[self.collection_name]
