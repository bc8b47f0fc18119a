"""Paystack client: transaction verification only."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..utils.exceptions import PaymentGatewayError
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GatewayTransaction:
    """The parts of a verified transaction the payment flow needs"""
    reference: str
    status: str
    amount: float
    currency: str
    transaction_id: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


class PaystackGateway:
    """Verifies transactions against the Paystack REST API"""

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.paystack.co",
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type((requests.exceptions.ConnectionError, requests.exceptions.Timeout)),
    )
    def _get(self, path: str) -> Dict[str, Any]:
        response = self.session.get(
            f"{self.base_url}/{path.lstrip('/')}",
            headers={"Authorization": f"Bearer {self.secret_key}"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def verify(self, reference: str) -> GatewayTransaction:
        """
        Look up a transaction by reference.

        Raises:
            PaymentGatewayError: secret key missing, transport failure after
                retries, HTTP error or an unreadable response.
        """
        if not self.secret_key:
            logger.error("Paystack secret key not configured")
            raise PaymentGatewayError("Paystack secret key not configured")

        try:
            body = self._get(f"/transaction/verify/{reference}")
        except RetryError as e:
            logger.warning("Paystack unreachable", reference=reference, error=str(e))
            raise PaymentGatewayError()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Paystack verification request failed", reference=reference, error=str(e))
            raise PaymentGatewayError()

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            logger.warning("Paystack response without data", reference=reference)
            raise PaymentGatewayError()

        return GatewayTransaction(
            reference=reference,
            status=str(data.get("status") or ""),
            amount=float(data.get("amount") or 0),
            currency=str(data.get("currency") or "NGN"),
            transaction_id=str(data["id"]) if data.get("id") is not None else None,
        )
