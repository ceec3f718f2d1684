"""
Shared MongoDB connection lifecycle.

This module provides:
- ConnectionManager: one Motor client per process, created on first use
- Single-flight connection attempts: concurrent first callers share one attempt
- Health check and credential-safe connection info
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Any]
IndexInitializer = Callable[[AsyncIOMotorDatabase], Awaitable[None]]


class ConnectionClosedError(RuntimeError):
    """The manager was closed before a pending attempt completed."""

    pass


class ConnectionState(str, Enum):
    """Lifecycle state of the shared connection."""

    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class ConnectionManager:
    """
    Owns the single shared handle to the backing document store.

    At most one connection attempt is outstanding at any time. Callers that
    arrive while an attempt is in flight await that same attempt. A failed
    attempt leaves nothing cached, so the next call starts a fresh one.
    """

    def __init__(
        self,
        uri: str,
        database_name: str,
        server_selection_timeout_ms: int = 5000,
        client_factory: Optional[ClientFactory] = None,
        on_connect: Optional[IndexInitializer] = None,
    ):
        if not uri:
            raise ValueError("MongoDB URI is required")

        self.uri = uri
        self.database_name = database_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory or AsyncIOMotorClient
        self._on_connect = on_connect

        self._client: Optional[Any] = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        self._pending: Optional[asyncio.Task] = None
        # Bumped by close(); an attempt started under an older generation
        # must not publish its handle.
        self._generation = 0

    @property
    def state(self) -> ConnectionState:
        if self._database is not None:
            return ConnectionState.CONNECTED
        if self._pending is not None:
            return ConnectionState.CONNECTING
        return ConnectionState.UNINITIALIZED

    async def acquire(self) -> AsyncIOMotorDatabase:
        """
        Return the shared database handle, connecting on first use.

        Raises:
            Exception: whatever the connection attempt raised. Every caller
                waiting on the same attempt receives the same exception.
        """
        if self._database is not None:
            return self._database

        if self._pending is None:
            self._pending = asyncio.create_task(self._connect(self._generation))

        # Shield so a cancelled caller does not cancel the shared attempt
        return await asyncio.shield(self._pending)

    async def _connect(self, generation: int) -> AsyncIOMotorDatabase:
        logger.info(f"Connecting to MongoDB at {sanitize_mongodb_url(self.uri)}")
        client = None
        try:
            client = self._client_factory(
                self.uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            )
            # Motor connects lazily; ping so the handle is only published once
            # the server is reachable.
            await client.admin.command("ping")

            database = client[self.database_name]
            if self._on_connect is not None:
                await self._on_connect(database)

            if generation != self._generation:
                raise ConnectionClosedError("Connection manager was closed while connecting")
        except Exception as e:
            logger.error(f"MongoDB connection failed: {e}")
            if client is not None:
                client.close()
            raise
        finally:
            if generation == self._generation:
                self._pending = None

        self._client = client
        self._database = database
        logger.info(f"MongoDB connection established (database={self.database_name})")
        return database

    async def ping(self) -> bool:
        """Check if the MongoDB connection is healthy."""
        try:
            database = await self.acquire()
            await database.command("ping")
            return True
        except Exception as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    def close(self) -> None:
        """Close the client and return to the uninitialized state."""
        self._generation += 1
        self._pending = None
        if self._client is not None:
            self._client.close()
            logger.info("Closed MongoDB connection")
        self._client = None
        self._database = None

    def info(self) -> dict:
        """Get connection information and status."""
        return {
            "status": self.state.value,
            "url": sanitize_mongodb_url(self.uri),
            "database": self.database_name,
        }


def sanitize_mongodb_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    if "@" not in rest:
        return url

    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url
