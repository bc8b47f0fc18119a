"""
FastAPI dependencies: the service container and the auth guard.

require_login():
- Reads the credential from the auth cookie, falling back to
  Authorization: Bearer <token>
- Resolves it through the auth service (signature, expiry, user exists)
- Returns the authenticated user object
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from pymongo.database import Database

from drivedoc.auth import AuthService, OAuthClient, TokenSigner
from drivedoc.bookings import BookingService
from drivedoc.documents import DocumentService
from drivedoc.models.user import User
from drivedoc.notifications import ExpiryScanner, PushSender, WebPushSender
from drivedoc.payments import PaymentService, PaystackGateway
from drivedoc.stores import BookingStore, DocumentStore, PaymentStore, UserStore
from drivedoc.utils.config import Settings
from drivedoc.utils.timeutil import Clock, utcnow


@dataclass
class Services:
    settings: Settings
    db: Database
    users: UserStore
    auth: AuthService
    documents: DocumentService
    bookings: BookingService
    payments: PaymentService
    scanner: ExpiryScanner


def build_services(
    settings: Settings,
    db: Database,
    gateway: Optional[PaystackGateway] = None,
    push_sender: Optional[PushSender] = None,
    oauth: Optional[OAuthClient] = None,
    clock: Clock = utcnow,
) -> Services:
    users = UserStore(db)
    document_store = DocumentStore(db)
    soon_days = settings.notifications.soon_days

    documents = DocumentService(document_store, soon_days=soon_days, clock=clock)
    gateway = gateway or PaystackGateway(
        secret_key=settings.payments.paystack_secret_key,
        base_url=settings.payments.paystack_base_url,
        timeout=settings.payments.timeout_seconds,
    )
    push_sender = push_sender or WebPushSender(
        vapid_private_key=settings.push.vapid_private_key,
        contact=settings.push.contact,
    )
    return Services(
        settings=settings,
        db=db,
        users=users,
        auth=AuthService(
            users,
            TokenSigner(
                settings.auth.secret,
                expiry_days=settings.auth.token_expiry_days,
                salt=settings.auth.salt,
            ),
            oauth=oauth,
        ),
        documents=documents,
        bookings=BookingService(BookingStore(db)),
        payments=PaymentService(PaymentStore(db), documents, gateway, clock=clock),
        scanner=ExpiryScanner(document_store, users, push_sender, clock=clock, soon_days=soon_days),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def extract_token(request: Request, cookie_name: str = "token") -> Optional[str]:
    # Prefer cookie for browser flows
    token = request.cookies.get(cookie_name)
    if token:
        return token
    # Fallback to Authorization: Bearer <token>
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None
    return None


def require_login(request: Request) -> User:
    """
    Dependency for protected routes.

    Raises AuthenticationError (401) if the credential is missing or invalid,
    or if the user it names no longer exists.
    """
    services = get_services(request)
    token = extract_token(request, services.settings.auth.cookie_name)
    return services.auth.resolve(token)
