"""Data models for DriveDoc records and API payloads"""

from .booking import Booking, BookingCreate, BookingStatus, LessonType
from .document import Document, DocumentCreate, DocumentStatus, DocumentUpdate
from .payment import Payment, PaymentStatus, PaymentVerifyRequest
from .user import (
    EndpointRequest,
    LoginRequest,
    OAuthRequest,
    PushSubscription,
    SignupRequest,
    SubscriptionRequest,
    User,
)

__all__ = [
    "Booking",
    "BookingCreate",
    "BookingStatus",
    "LessonType",
    "Document",
    "DocumentCreate",
    "DocumentStatus",
    "DocumentUpdate",
    "Payment",
    "PaymentStatus",
    "PaymentVerifyRequest",
    "EndpointRequest",
    "LoginRequest",
    "OAuthRequest",
    "PushSubscription",
    "SignupRequest",
    "SubscriptionRequest",
    "User",
]
