"""MongoDB-backed stores, one per collection."""

from .bookings import BookingStore
from .documents import DocumentStore
from .payments import PaymentStore
from .users import UserStore

__all__ = ["BookingStore", "DocumentStore", "PaymentStore", "UserStore"]
