"""Owner-scoped document operations. Status is recomputed on every write."""

from __future__ import annotations

from typing import Any, Dict

from ..models.document import Document, DocumentCreate, DocumentUpdate
from ..models.user import User
from ..stores.base import page_meta, page_window
from ..stores.documents import DocumentStore
from ..utils.exceptions import AuthenticationError, NotFoundError
from ..utils.logger import get_logger
from ..utils.timeutil import Clock, utcnow
from .status import DEFAULT_SOON_DAYS, compute_status

logger = get_logger(__name__)


class DocumentService:
    def __init__(
        self,
        store: DocumentStore,
        soon_days: int = DEFAULT_SOON_DAYS,
        clock: Clock = utcnow,
    ):
        self.store = store
        self.soon_days = soon_days
        self.clock = clock

    def with_status(self, document: Document) -> Document:
        """Copy of the document with status derived from its expiry and the clock."""
        status = compute_status(document.expiry_date, self.clock(), self.soon_days)
        return document.model_copy(update={"status": status.value})

    def list(self, user: User, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        window = page_window(page, limit)
        documents, total = self.store.list_for_user(user.id, window["skip"], window["limit"])
        meta = page_meta(total, window["page"], window["limit"], len(documents))
        return {**meta, "documents": [d.public() for d in documents]}

    def create(self, user: User, payload: DocumentCreate) -> Document:
        document = Document(user=user.id, **payload.model_dump())
        document = self.store.insert(self.with_status(document))
        logger.info(
            "Document created",
            document_id=document.id,
            user_id=user.id,
            status=document.status,
        )
        return document

    def get_owned(self, user: User, document_id: str, action: str) -> Document:
        document = self.store.get(document_id)
        if document is None:
            raise NotFoundError("Document not found")
        if document.user != user.id:
            raise AuthenticationError(f"Not authorized to {action} this document")
        return document

    def update(self, user: User, document_id: str, payload: DocumentUpdate) -> Document:
        document = self.get_owned(user, document_id, "update")
        # issue_date is the only field that may be cleared
        changes = {
            k: v
            for k, v in payload.model_dump(exclude_unset=True).items()
            if v is not None or k == "issue_date"
        }
        document = self.with_status(document.model_copy(update=changes))
        self.store.save(document)
        logger.info("Document updated", document_id=document.id, status=document.status)
        return document

    def delete(self, user: User, document_id: str) -> None:
        self.get_owned(user, document_id, "delete")
        self.store.delete(document_id)
        logger.info("Document deleted", document_id=document_id, user_id=user.id)
