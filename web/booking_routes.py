"""Lesson booking routes (owner-scoped). Prefix: /bookings"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from drivedoc.models.booking import BookingCreate
from drivedoc.models.user import User

from .deps import Services, get_services, require_login

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("")
def my_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    return {"success": True, **services.bookings.list(current_user, page, limit)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    booking = services.bookings.create(current_user, payload)
    return {"success": True, "data": booking.public()}


@router.put("/{booking_id}/cancel")
def cancel_booking(
    booking_id: str,
    current_user: User = Depends(require_login),
    services: Services = Depends(get_services),
) -> Dict[str, Any]:
    booking = services.bookings.cancel(current_user, booking_id)
    return {"success": True, "data": booking.public()}
