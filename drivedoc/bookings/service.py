"""Lesson bookings: one active booking per owner and (date, startTime) slot."""

from __future__ import annotations

from typing import Any, Dict

from pymongo.errors import DuplicateKeyError

from ..models.booking import Booking, BookingCreate
from ..models.user import User
from ..stores.base import page_meta, page_window
from ..stores.bookings import BookingStore
from ..utils.exceptions import AuthenticationError, ConflictError, NotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)

SLOT_TAKEN_MESSAGE = "You already have a booking at this time"


class BookingService:
    def __init__(self, store: BookingStore):
        self.store = store

    def create(self, user: User, payload: BookingCreate) -> Booking:
        date = payload.date.isoformat()
        if self.store.find_active(user.id, date, payload.start_time) is not None:
            raise ConflictError(SLOT_TAKEN_MESSAGE)

        booking = Booking(
            user=user.id,
            date=date,
            start_time=payload.start_time,
            lesson_type=payload.lesson_type,
            notes=payload.notes,
        )
        try:
            booking = self.store.insert(booking)
        except DuplicateKeyError:
            # Lost a race with a concurrent create for the same slot
            logger.info("Booking slot taken concurrently", user_id=user.id, date=date, start_time=payload.start_time)
            raise ConflictError(SLOT_TAKEN_MESSAGE)
        logger.info(
            "Booking created",
            booking_id=booking.id,
            user_id=user.id,
            date=date,
            start_time=booking.start_time,
        )
        return booking

    def list(self, user: User, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        window = page_window(page, limit)
        bookings, total = self.store.list_for_user(user.id, window["skip"], window["limit"])
        meta = page_meta(total, window["page"], window["limit"], len(bookings))
        return {**meta, "data": [b.public() for b in bookings]}

    def cancel(self, user: User, booking_id: str) -> Booking:
        booking = self.store.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        if booking.user != user.id:
            raise AuthenticationError("Not authorized to cancel this booking")
        cancelled = self.store.mark_cancelled(booking_id)
        logger.info("Booking cancelled", booking_id=booking_id, user_id=user.id)
        return cancelled
