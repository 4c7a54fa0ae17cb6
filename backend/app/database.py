"""
Hidden Gems Backend — MongoDB Connection Management
====================================================

What:  Async MongoDB client lifecycle and the FastAPI dependency that hands
       the gems collection to request handlers.
Why:   Centralizes all database connection logic in one place, and keeps the
       connection an explicitly constructed object instead of a module global.
How:   `MongoConnection.connect()` builds an `AsyncMongoClient`, pings the
       server once, and resolves the configured collection. The lifespan in
       main.py stores the connection on `app.state`; `get_gem_service` reads it
       back for every request.
When:  Connected once at startup, closed once at shutdown.

Connection Pooling:
    pymongo's client owns its own pool and is safe to share across every
    concurrently running handler. No extra locking is needed here.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from app.config import Settings
from app.exceptions import StoreConnectionError
from app.services.gem_service import GemService

logger = logging.getLogger(__name__)


class MongoConnection:
    """
    Owns one AsyncMongoClient and the `hidden_gems` collection handle.

    Attributes:
        database_name:    Database holding the collection
        collection_name:  Name of the gems collection
    """

    def __init__(self, settings: Settings):
        self._uri = settings.mongodb_uri
        self._timeout_ms = settings.mongodb_server_selection_timeout_ms
        self.database_name = settings.mongodb_database
        self.collection_name = settings.mongodb_collection
        self._client: Optional[AsyncMongoClient] = None
        self._collection: Optional[AsyncCollection] = None

    async def connect(self) -> None:
        """
        Create the client and verify the server answers a ping.

        pymongo connects lazily, so the ping is what actually proves the
        cluster is reachable and the credentials are accepted.

        Raises:
            StoreConnectionError: the ping failed (fatal at startup)
        """
        client: AsyncMongoClient = AsyncMongoClient(
            self._uri,
            serverSelectionTimeoutMS=self._timeout_ms,
            tz_aware=True,
        )
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            await client.close()
            raise StoreConnectionError(
                context={"error_type": type(e).__name__, "error": str(e)},
            ) from e

        self._client = client
        self._collection = client[self.database_name][self.collection_name]
        logger.info(
            "Connected to MongoDB (database=%s, collection=%s)",
            self.database_name,
            self.collection_name,
        )

    @property
    def collection(self) -> AsyncCollection:
        if self._collection is None:
            raise RuntimeError("MongoConnection.connect() has not been awaited")
        return self._collection

    async def ping(self) -> bool:
        """Lightweight liveness probe used by GET /health."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False
        return True

    def describe(self) -> Dict[str, Any]:
        return {"database": self.database_name, "collection": self.collection_name}

    async def close(self) -> None:
        """Close the client and all pooled connections."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._collection = None


# ── Dependencies ──────────────────────────────────────────────────────────
def get_connection(request: Request) -> MongoConnection:
    """FastAPI dependency returning the connection created by the lifespan."""
    return request.app.state.mongo


def get_gem_service(connection: MongoConnection = Depends(get_connection)) -> GemService:
    """
    FastAPI dependency that provides the gem service for a request.

    The service is a thin wrapper around the shared collection, so building
    one per request costs nothing and keeps handlers free of globals.

    Example usage in a route:
        @router.get("/gems")
        async def list_gems(service: GemService = Depends(get_gem_service)):
            return await service.list_gems()
    """
    return GemService(connection.collection)
