from .service import SLOT_TAKEN_MESSAGE, BookingService

__all__ = ["BookingService", "SLOT_TAKEN_MESSAGE"]
