"""Payment storage backed by the `payments` collection (unique on reference)."""

from __future__ import annotations

from typing import Optional

from pymongo.database import Database

from ..db import PAYMENTS
from ..models.payment import Payment


class PaymentStore:
    def __init__(self, db: Database):
        self.collection = db[PAYMENTS]

    def get_by_reference(self, reference: str) -> Optional[Payment]:
        return Payment.from_mongo(self.collection.find_one({"reference": reference}))

    def insert(self, payment: Payment) -> Payment:
        """Raises DuplicateKeyError when the reference was already recorded."""
        result = self.collection.insert_one(payment.to_mongo())
        return payment.model_copy(update={"id": str(result.inserted_id)})
