"""
Benefícios API: MongoDB Connection Management
==============================================

What:  Process-wide Motor client, the `beneficios` collection handle, and the
       FastAPI dependency that hands it to route handlers.
Why:   Centralizes all database connection logic in one place.
How:   `connect_to_mongo()` runs once in the app lifespan, pings the server
       (with retries) and stores the client; `get_beneficios_collection()`
       returns the shared collection to each request.
Who:   Lifespan in main.py (connect/close), routes via Depends().
When:  Client is created at startup; never re-created per request.

Architecture Decision:
    Motor (async driver) keeps every request on the event loop. Each handler
    suspends only on its driver call, so a slow query stalls its own request
    and nothing else. The client owns its connection pool; the collection
    handle is read-only shared state.
"""

import logging
from typing import Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential_jitter,
)

from app.config import settings
from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)

# ── Shared Handles ────────────────────────────────────────────────────────
# Set by connect_to_mongo(), cleared by close_mongo_connection()
_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


def get_client() -> Optional[AsyncIOMotorClient]:
    """Current client, or None before startup / after shutdown."""
    return _client


async def ping(client: AsyncIOMotorClient) -> None:
    """Round-trip to the server. Raises the driver error on failure."""
    await client.admin.command("ping")


async def connect_to_mongo() -> AsyncIOMotorDatabase:
    """
    Create the client and verify the server answers.

    What:    Opens the connection pool and runs `ping` until it succeeds.
    Why retry here: At container start the database is often still booting.
             Requests themselves are never retried.
    How:     tenacity AsyncRetrying with exponential backoff and jitter,
             `connect_max_attempts` tries.

    Returns:
        The application database handle.

    Raises:
        DatabaseError: the server did not answer after all attempts
    """
    global _client, _database

    client = AsyncIOMotorClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        tz_aware=True,
    )

    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(settings.connect_max_attempts),
            wait=wait_exponential_jitter(initial=1, max=10, jitter=1),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                await ping(client)
    except Exception as e:
        client.close()
        logger.error("Could not reach MongoDB at startup: %s", str(e))
        raise DatabaseError(
            message="MongoDB is unreachable",
            context={"error_type": type(e).__name__},
        ) from e

    _client = client
    _database = client[settings.mongodb_database]
    logger.info(
        "Connected to MongoDB database '%s' (collection '%s')",
        settings.mongodb_database,
        settings.mongodb_collection,
    )
    return _database


def close_mongo_connection() -> None:
    """Close the pool at shutdown. Safe to call when never connected."""
    global _client, _database
    if _client is not None:
        _client.close()
        logger.info("MongoDB connection closed")
    _client = None
    _database = None


# ── Collection Dependency ─────────────────────────────────────────────────
def get_beneficios_collection() -> AsyncIOMotorCollection:
    """
    FastAPI dependency returning the shared `beneficios` collection.

    Tests replace it through `app.dependency_overrides`.

    Raises:
        DatabaseError: the lifespan has not connected (or already closed)
    """
    if _database is None:
        raise DatabaseError(message="Database connection is not initialized")
    return _database[settings.mongodb_collection]
