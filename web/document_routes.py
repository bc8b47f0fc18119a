"""Document routes (owner-scoped). Prefix: /documents"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from drivedoc.models.document import DocumentCreate, DocumentUpdate
from drivedoc.models.user import User

from .deps import Services, get_services, require_login

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("")
def list_documents(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    return {"success": True, **services.documents.list(current_user, page, limit)}


@router.post("", status_code=status.HTTP_201_CREATED)
def add_document(
    payload: DocumentCreate,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    document = services.documents.create(current_user, payload)
    return {"success": True, "message": "Document added successfully", "document": document.public()}


@router.put("/{document_id}")
def update_document(
    document_id: str,
    payload: DocumentUpdate,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    document = services.documents.update(current_user, document_id, payload)
    return {"success": True, "message": "Document updated successfully", "document": document.public()}


@router.delete("/{document_id}")
def delete_document(
    document_id: str,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    services.documents.delete(current_user, document_id)
    return {"success": True, "message": "Document deleted successfully"}
