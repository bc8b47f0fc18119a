"""
Expiry scan: find expired and soon-expiring documents and fan out push
notifications to their owners' enabled subscriptions.

Delivery is best effort. A failed send is recorded in the ScanReport and
never stops the scan; there is no retry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Protocol

from ..models.document import Document
from ..models.user import PushSubscription
from ..stores.documents import DocumentStore
from ..stores.users import UserStore
from ..utils.logger import get_logger
from ..utils.timeutil import Clock, utcnow
from .sender import DeliveryResult

logger = get_logger(__name__)

EXPIRY_DATE_FORMAT = "%Y-%m-%d"


class PushSender(Protocol):
    def send(self, subscription: PushSubscription, payload: Dict[str, Any]) -> DeliveryResult: ...


@dataclass
class ScanReport:
    expired_documents: int = 0
    expiring_documents: int = 0
    results: List[DeliveryResult] = field(default_factory=list)

    @property
    def sent(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)


def expired_payload(document: Document) -> Dict[str, str]:
    return {
        "title": "Document expired",
        "body": f"{document.type} ({document.number}) has expired",
    }


def expiring_payload(document: Document) -> Dict[str, str]:
    expires_on = document.expiry_date.strftime(EXPIRY_DATE_FORMAT)
    return {
        "title": "Document expiring soon",
        "body": f"{document.type} ({document.number}) expires on {expires_on}",
    }


class ExpiryScanner:
    def __init__(
        self,
        documents: DocumentStore,
        users: UserStore,
        sender: PushSender,
        clock: Clock = utcnow,
        soon_days: int = 30,
    ):
        self.documents = documents
        self.users = users
        self.sender = sender
        self.clock = clock
        self.soon_days = soon_days

    def scan(self) -> ScanReport:
        now = self.clock()
        expired = self.documents.find_expired(now)
        expiring = self.documents.find_expiring(now, now + timedelta(days=self.soon_days))
        report = ScanReport(expired_documents=len(expired), expiring_documents=len(expiring))

        # Owner subscriptions are looked up once per scan
        subscriptions: Dict[str, List[PushSubscription]] = {}

        for document in expired:
            self._notify(document, expired_payload(document), subscriptions, report)
        for document in expiring:
            self._notify(document, expiring_payload(document), subscriptions, report)

        logger.info(
            "Expiry scan finished",
            expired=report.expired_documents,
            expiring=report.expiring_documents,
            sent=report.sent,
            failed=report.failed,
        )
        return report

    def _notify(
        self,
        document: Document,
        payload: Dict[str, str],
        subscriptions: Dict[str, List[PushSubscription]],
        report: ScanReport,
    ) -> None:
        if document.user not in subscriptions:
            subscriptions[document.user] = self.users.enabled_subscriptions(document.user)
        for sub in subscriptions[document.user]:
            try:
                result = self.sender.send(sub, payload)
            except Exception as e:
                result = DeliveryResult(endpoint=sub.endpoint, ok=False, reason=str(e))
            result = DeliveryResult(
                endpoint=result.endpoint,
                ok=result.ok,
                document_id=document.id,
                reason=result.reason,
            )
            if not result.ok:
                logger.debug(
                    "Push delivery failed",
                    document_id=document.id,
                    endpoint=sub.endpoint[:60],
                    reason=result.reason,
                )
            report.results.append(result)
