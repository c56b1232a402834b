"""
MongoDB integration.

This module owns the process-wide ``MongoClient``: ``connect`` opens
it at application startup, ``init_db`` creates the indexes the
services rely on, and ``close`` releases it at shutdown.  Routes never
reach for a global connection; they receive the database handle
through the ``get_db`` dependency, which reads it from ``app.state``.

Collections:

* ``users``: accounts, unique on ``email``.
* ``services``: the service catalog.
* ``bookings``: customer bookings.
* ``slot_claims``: one document per occupied ``(date, slot)`` pair.
  The pair is the document ``_id``, so the primary key index makes
  occupying a slot a single atomic insert.
"""

import functools
import logging
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Optional, TypeVar

from bson import ObjectId
from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from .config import Settings


logger = logging.getLogger(__name__)

T = TypeVar("T")

USERS = "users"
SERVICES = "services"
BOOKINGS = "bookings"
SLOT_CLAIMS = "slot_claims"


def connect(settings: Settings) -> MongoClient:
    """Create a client for ``settings.mongo_uri``.

    The driver connects lazily, so this never blocks; the first
    operation (``init_db``) surfaces connection problems.
    """
    logger.info("Connecting to MongoDB database %s", settings.mongo_db_name)
    return MongoClient(settings.mongo_uri, tz_aware=False)


def init_db(db: Database) -> None:
    """Create the indexes used by the service layer.  Idempotent."""
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[USERS].create_index([("created_at", DESCENDING)])
    db[SERVICES].create_index([("status", ASCENDING), ("category", ASCENDING)])
    db[BOOKINGS].create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    db[BOOKINGS].create_index([("booking_date", ASCENDING), ("time_slot", ASCENDING)])
    db[BOOKINGS].create_index([("status", ASCENDING)])
    logger.info("MongoDB indexes ensured on %s", db.name)


def close(client: Optional[MongoClient]) -> None:
    if client is not None:
        client.close()
        logger.info("MongoDB connection closed")


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the database opened at startup."""
    return request.app.state.db


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form MongoDB returns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def day_start(value: date) -> datetime:
    """Midnight at the start of ``value``; booking dates are stored this way."""
    return datetime(value.year, value.month, value.day)


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Return ``value`` as an ``ObjectId`` or ``None`` if it is malformed."""
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def in_threadpool(func: Callable[..., T]) -> Callable[..., Awaitable[T]]:
    """Run a blocking store method in the worker threadpool.

    ``pymongo`` calls block, so service methods are written as plain
    functions and wrapped with this decorator.  They stay awaitable and
    the event loop keeps serving other requests meanwhile.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        return await run_in_threadpool(func, *args, **kwargs)

    return wrapper
