"""MongoDB client factory and index setup."""

from __future__ import annotations

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from .utils.config import DatabaseSettings
from .utils.logger import get_logger

logger = get_logger(__name__)

USERS = "users"
DOCUMENTS = "documents"
BOOKINGS = "bookings"
PAYMENTS = "payments"


def connect(settings: DatabaseSettings) -> Database:
    """Create a client and return the configured database (connection is lazy)."""
    client: MongoClient = MongoClient(
        settings.uri,
        serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
    )
    logger.info("MongoDB client created", database=settings.name)
    return client[settings.name]


def ensure_indexes(db: Database) -> None:
    """
    Create the indexes the application relies on.

    The unique ones carry invariants: one account per email, one active
    booking per (user, date, startTime) slot, one payment per gateway reference.
    """
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[DOCUMENTS].create_index([("user", ASCENDING), ("createdAt", DESCENDING)])
    db[DOCUMENTS].create_index([("expiryDate", ASCENDING)])
    db[BOOKINGS].create_index([("slotKey", ASCENDING)], unique=True)
    db[BOOKINGS].create_index([("user", ASCENDING), ("date", ASCENDING), ("startTime", ASCENDING)])
    db[PAYMENTS].create_index([("reference", ASCENDING)], unique=True)
    logger.info("MongoDB indexes ensured", database=db.name)
