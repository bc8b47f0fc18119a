"""
Booking storage backed by the `bookings` collection.

Each record carries a `slotKey` with a unique index. While a booking is
active the key is "<user>|<date>|<startTime>"; cancelling rewrites it to
"cancelled|<booking id>" so the slot becomes free again. Two active bookings
for the same owner and slot therefore cannot both be stored, even when two
creates race past the read-side check.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from pymongo import ASCENDING
from pymongo.database import Database

from ..db import BOOKINGS
from ..models.booking import Booking, BookingStatus
from .base import to_object_id


def active_slot_key(user_id: str, date: str, start_time: str) -> str:
    return f"{user_id}|{date}|{start_time}"


def cancelled_slot_key(booking_id: str) -> str:
    return f"cancelled|{booking_id}"


class BookingStore:
    def __init__(self, db: Database):
        self.collection = db[BOOKINGS]

    def get(self, booking_id: str) -> Optional[Booking]:
        oid = to_object_id(booking_id)
        if oid is None:
            return None
        return Booking.from_mongo(self.collection.find_one({"_id": oid}))

    def find_active(self, user_id: str, date: str, start_time: str) -> Optional[Booking]:
        """Non-cancelled booking of this owner at exactly (date, start_time)."""
        raw = self.collection.find_one(
            {
                "user": user_id,
                "date": date,
                "startTime": start_time,
                "status": {"$ne": BookingStatus.CANCELLED.value},
            }
        )
        return Booking.from_mongo(raw)

    def insert(self, booking: Booking) -> Booking:
        """Insert an active booking. Raises DuplicateKeyError if the slot is taken."""
        data = booking.to_mongo()
        data["slotKey"] = active_slot_key(booking.user, booking.date, booking.start_time)
        result = self.collection.insert_one(data)
        return booking.model_copy(update={"id": str(result.inserted_id)})

    def list_for_user(self, user_id: str, skip: int, limit: int) -> Tuple[List[Booking], int]:
        """Ordered by date, then start time."""
        total = self.collection.count_documents({"user": user_id})
        cursor = (
            self.collection.find({"user": user_id})
            .sort([("date", ASCENDING), ("startTime", ASCENDING)])
            .skip(skip)
            .limit(limit)
        )
        return [Booking.from_mongo(raw) for raw in cursor], total

    def mark_cancelled(self, booking_id: str) -> Optional[Booking]:
        oid = to_object_id(booking_id)
        if oid is None:
            return None
        self.collection.update_one(
            {"_id": oid},
            {
                "$set": {
                    "status": BookingStatus.CANCELLED.value,
                    "slotKey": cancelled_slot_key(booking_id),
                }
            },
        )
        return self.get(booking_id)
