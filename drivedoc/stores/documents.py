"""Document storage backed by the `documents` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pymongo import DESCENDING
from pymongo.database import Database

from ..db import DOCUMENTS
from ..models.document import Document
from .base import to_object_id


class DocumentStore:
    def __init__(self, db: Database):
        self.collection = db[DOCUMENTS]

    def get(self, document_id: str) -> Optional[Document]:
        oid = to_object_id(document_id)
        if oid is None:
            return None
        return Document.from_mongo(self.collection.find_one({"_id": oid}))

    def list_for_user(self, user_id: str, skip: int, limit: int) -> Tuple[List[Document], int]:
        """Newest first. Returns (page of documents, total count for the user)."""
        total = self.collection.count_documents({"user": user_id})
        cursor = (
            self.collection.find({"user": user_id})
            .sort("createdAt", DESCENDING)
            .skip(skip)
            .limit(limit)
        )
        return [Document.from_mongo(raw) for raw in cursor], total

    def insert(self, document: Document) -> Document:
        result = self.collection.insert_one(document.to_mongo())
        return document.model_copy(update={"id": str(result.inserted_id)})

    def save(self, document: Document) -> Document:
        """Overwrite every stored field of an existing document."""
        self.collection.update_one(
            {"_id": to_object_id(document.id)},
            {"$set": document.to_mongo()},
        )
        return document

    def delete(self, document_id: str) -> bool:
        oid = to_object_id(document_id)
        if oid is None:
            return False
        return self.collection.delete_one({"_id": oid}).deleted_count == 1

    def find_expired(self, now: datetime) -> List[Document]:
        """Documents whose expiry is at or before now."""
        return self._find({"expiryDate": {"$lte": now}})

    def find_expiring(self, now: datetime, until: datetime) -> List[Document]:
        """Documents expiring after now and no later than until."""
        return self._find({"expiryDate": {"$gt": now, "$lte": until}})

    def _find(self, query: Dict[str, Any]) -> List[Document]:
        return [Document.from_mongo(raw) for raw in self.collection.find(query)]
