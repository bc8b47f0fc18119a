"""Payment records and request payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from ..utils.timeutil import utcnow
from .base import CamelModel, MongoModel


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class Payment(MongoModel):
    user: str
    document: str
    type: str = "renewal"
    amount: float
    currency: str = "NGN"
    reference: str  # gateway reference, idempotency key
    transaction_id: Optional[str] = None
    status: PaymentStatus = PaymentStatus.PENDING
    date: datetime = Field(default_factory=utcnow)


class PaymentVerifyRequest(CamelModel):
    reference: str = Field(min_length=1)
    document_id: str = Field(min_length=1)
