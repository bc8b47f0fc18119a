"""Payment routes. Prefix: /payments"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from drivedoc.models.payment import PaymentVerifyRequest
from drivedoc.models.user import User

from .deps import Services, get_services, require_login

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/verify")
def verify_payment(
    payload: PaymentVerifyRequest,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    """
    Verify a gateway reference and renew the document by one year.

    Replaying a reference that was already recorded succeeds without
    extending the document again.
    """
    outcome = services.payments.verify(current_user, payload.reference, payload.document_id)
    body: Dict[str, Any] = {"success": True, "message": outcome.message}
    if outcome.document is not None:
        body["document"] = outcome.document.public()
    return body
