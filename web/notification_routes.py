"""
Push subscription routes. Prefix: /notifications

public-key is public; everything else requires login.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from drivedoc.models.user import EndpointRequest, SubscriptionRequest, User
from drivedoc.utils.exceptions import NotFoundError

from .deps import Services, get_services, require_login

router = APIRouter(prefix="/notifications", tags=["notifications"])

SUBSCRIPTION_NOT_FOUND = "Subscription not found"


@router.get("/public-key")
def public_key(services: Services = Depends(get_services)) -> Dict[str, Any]:
    return {"publicKey": services.settings.push.vapid_public_key or ""}


@router.post("/subscribe", status_code=status.HTTP_201_CREATED)
def subscribe(
    payload: SubscriptionRequest,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    services.users.upsert_subscription(current_user.id, payload.endpoint, payload.keys)
    return {"success": True}


def _toggle(services: Services, user: User, endpoint: str, enabled: bool) -> Dict[str, Any]:
    if not services.users.set_subscription_enabled(user.id, endpoint, enabled):
        raise NotFoundError(SUBSCRIPTION_NOT_FOUND)
    return {"success": True}


@router.post("/opt-in")
def opt_in(
    payload: EndpointRequest,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    return _toggle(services, current_user, payload.endpoint, True)


@router.post("/opt-out")
def opt_out(
    payload: EndpointRequest,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    return _toggle(services, current_user, payload.endpoint, False)


@router.post("/unsubscribe")
def unsubscribe(
    payload: EndpointRequest,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    if not services.users.remove_subscription(current_user.id, payload.endpoint):
        raise NotFoundError(SUBSCRIPTION_NOT_FOUND)
    return {"success": True}
