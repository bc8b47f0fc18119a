"""Shared fixtures: in-memory MongoDB, fixed clock, fake gateway / push / OAuth."""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import mongomock
import pytest
from fastapi.testclient import TestClient

from drivedoc.auth import OAuthProfile, OAuthProfileError
from drivedoc.db import ensure_indexes
from drivedoc.models.user import PushSubscription
from drivedoc.notifications import DeliveryResult
from drivedoc.payments import GatewayTransaction
from drivedoc.utils.config import (
    AppSettings,
    AuthSettings,
    LoggingSettings,
    NotificationSettings,
    PushSettings,
    Settings,
)
from drivedoc.utils.exceptions import PaymentGatewayError
from web.main import create_app

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0)
STRONG_PASSWORD = "Passw0rdX"


class FixedClock:
    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeGateway:
    """Stands in for PaystackGateway; unknown references fail like a gateway error."""

    def __init__(self):
        self.transactions: Dict[str, GatewayTransaction] = {}
        self.calls: List[str] = []

    def add(self, reference: str, status: str = "success", amount: float = 500000, currency: str = "NGN"):
        self.transactions[reference] = GatewayTransaction(
            reference=reference,
            status=status,
            amount=amount,
            currency=currency,
            transaction_id=f"txn-{reference}",
        )

    def verify(self, reference: str) -> GatewayTransaction:
        self.calls.append(reference)
        if reference not in self.transactions:
            raise PaymentGatewayError()
        return self.transactions[reference]


class RecordingSender:
    def __init__(self):
        self.sent: List[Tuple[str, Dict[str, Any]]] = []
        self.fail_endpoints = set()
        self.raise_endpoints = set()

    def send(self, subscription: PushSubscription, payload: Dict[str, Any]) -> DeliveryResult:
        if subscription.endpoint in self.raise_endpoints:
            raise RuntimeError("connection reset")
        if subscription.endpoint in self.fail_endpoints:
            return DeliveryResult(endpoint=subscription.endpoint, ok=False, reason="push rejected (410)")
        self.sent.append((subscription.endpoint, payload))
        return DeliveryResult(endpoint=subscription.endpoint, ok=True)


class FakeOAuth:
    def __init__(self):
        self.profiles: Dict[Tuple[str, str], OAuthProfile] = {}

    def _lookup(self, provider: str, token: str) -> OAuthProfile:
        profile = self.profiles.get((provider, token))
        if profile is None:
            raise OAuthProfileError(f"Invalid {provider.title()} token")
        return profile

    def google_profile(self, access_token: str) -> OAuthProfile:
        return self._lookup("google", access_token)

    def facebook_profile(self, access_token: str) -> OAuthProfile:
        return self._lookup("facebook", access_token)


@pytest.fixture
def db():
    database = mongomock.MongoClient().db["drivedoc_test"]
    ensure_indexes(database)
    return database


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def oauth():
    return FakeOAuth()


@pytest.fixture
def settings():
    return Settings(
        app=AppSettings(environment="development"),
        auth=AuthSettings(secret="test-secret"),
        push=PushSettings(vapid_public_key="test-public-key", vapid_private_key="test-private-key"),
        notifications=NotificationSettings(enabled=False),
        logging=LoggingSettings(level="WARNING"),
    )


@pytest.fixture
def app(settings, db, gateway, sender, oauth, clock):
    return create_app(
        settings=settings,
        db=db,
        gateway=gateway,
        push_sender=sender,
        oauth=oauth,
        clock=clock,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def register(client):
    """Sign up a user and return (user, token). The session cookie is cleared afterwards."""

    def _register(email: str = "ada@example.com", password: str = STRONG_PASSWORD, full_name: str = "Ada Obi"):
        res = client.post(
            "/auth/signup",
            json={
                "fullName": full_name,
                "email": email,
                "phone": "+2348000000000",
                "country": "Nigeria",
                "password": password,
            },
        )
        assert res.status_code == 201, res.text
        client.cookies.clear()
        body = res.json()
        return body["user"], body["token"]

    return _register


def bearer(token: Optional[str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer
