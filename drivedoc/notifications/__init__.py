"""Expiry reminders delivered as browser push notifications."""

from .notifier import ExpiryNotifier
from .scanner import ExpiryScanner, PushSender, ScanReport, expired_payload, expiring_payload
from .sender import DeliveryResult, WebPushSender

__all__ = [
    "DeliveryResult",
    "ExpiryNotifier",
    "ExpiryScanner",
    "PushSender",
    "ScanReport",
    "WebPushSender",
    "expired_payload",
    "expiring_payload",
]
