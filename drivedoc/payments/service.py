"""
Payment verification and document renewal.

The gateway reference is the idempotency key: a reference that was already
recorded is acknowledged as success without extending the document again.
The unique index on payments.reference makes this hold under concurrent
requests too.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pymongo.errors import DuplicateKeyError

from ..documents.service import DocumentService
from ..models.document import Document
from ..models.payment import Payment, PaymentStatus
from ..models.user import User
from ..stores.payments import PaymentStore
from ..utils.exceptions import ValidationError
from ..utils.logger import get_logger
from ..utils.timeutil import Clock, add_years, utcnow
from .gateway import PaystackGateway

logger = get_logger(__name__)

ALREADY_PROCESSED = "Already processed"


@dataclass
class VerificationOutcome:
    message: str
    document: Optional[Document] = None
    already_processed: bool = False


def extended_expiry(current_expiry: datetime, now: datetime) -> datetime:
    """One year from now if already expired, else one year from the current expiry."""
    base = now if current_expiry < now else current_expiry
    return add_years(base, 1)


class PaymentService:
    def __init__(
        self,
        store: PaymentStore,
        documents: DocumentService,
        gateway: PaystackGateway,
        clock: Clock = utcnow,
    ):
        self.store = store
        self.documents = documents
        self.gateway = gateway
        self.clock = clock

    def verify(self, user: User, reference: str, document_id: str) -> VerificationOutcome:
        logger.info("Payment verify request", reference=reference, document_id=document_id, user_id=user.id)

        transaction = self.gateway.verify(reference)
        if not transaction.succeeded:
            logger.info("Payment not successful at gateway", reference=reference, status=transaction.status)
            raise ValidationError("Payment verification failed")

        if self.store.get_by_reference(reference) is not None:
            logger.info("Payment already processed", reference=reference)
            return VerificationOutcome(message=ALREADY_PROCESSED, already_processed=True)

        document = self.documents.get_owned(user, document_id, "renew")

        payment = Payment(
            user=user.id,
            document=document.id,
            amount=transaction.amount,
            currency=transaction.currency,
            reference=reference,
            transaction_id=transaction.transaction_id,
            status=PaymentStatus.SUCCESS,
        )
        try:
            self.store.insert(payment)
        except DuplicateKeyError:
            logger.info("Payment recorded concurrently", reference=reference)
            return VerificationOutcome(message=ALREADY_PROCESSED, already_processed=True)

        now = self.clock()
        new_expiry = extended_expiry(document.expiry_date, now)
        document = self.documents.with_status(document.model_copy(update={"expiry_date": new_expiry}))
        self.documents.store.save(document)
        logger.info(
            "Document renewed",
            document_id=document.id,
            reference=reference,
            expiry_date=new_expiry.isoformat(),
        )
        return VerificationOutcome(message="Payment verified", document=document)
