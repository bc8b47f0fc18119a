"""Web push delivery (VAPID) via pywebpush."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pywebpush import WebPushException, webpush

from ..models.user import PushSubscription
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one push attempt"""
    endpoint: str
    ok: bool
    document_id: Optional[str] = None
    reason: Optional[str] = None


class WebPushSender:
    """
    Sends JSON payloads to browser push endpoints.

    Never raises: every attempt is reported as a DeliveryResult.
    """

    def __init__(self, vapid_private_key: str = "", contact: str = "mailto:admin@example.com", ttl: int = 86400):
        self.vapid_private_key = vapid_private_key
        self.contact = contact
        self.ttl = ttl

    @property
    def configured(self) -> bool:
        return bool(self.vapid_private_key)

    def send(self, subscription: PushSubscription, payload: Dict[str, Any]) -> DeliveryResult:
        if not self.configured:
            return DeliveryResult(endpoint=subscription.endpoint, ok=False, reason="push not configured")
        try:
            webpush(
                subscription_info={"endpoint": subscription.endpoint, "keys": subscription.keys},
                data=json.dumps(payload),
                vapid_private_key=self.vapid_private_key,
                vapid_claims={"sub": self.contact},
                ttl=self.ttl,
            )
        except WebPushException as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            return DeliveryResult(
                endpoint=subscription.endpoint,
                ok=False,
                reason=f"push rejected ({status})" if status else str(e),
            )
        except Exception as e:
            # Malformed keys, network errors: isolated to this endpoint
            return DeliveryResult(endpoint=subscription.endpoint, ok=False, reason=str(e))
        return DeliveryResult(endpoint=subscription.endpoint, ok=True)
