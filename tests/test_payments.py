"""Payment verification: renewal arithmetic, idempotency and the Paystack client."""

from datetime import datetime
from unittest.mock import Mock

import pytest
import requests
from tenacity import wait_none

from drivedoc.documents import DocumentService
from drivedoc.models.document import Document
from drivedoc.models.user import User
from drivedoc.payments import ALREADY_PROCESSED, PaymentService, PaystackGateway, extended_expiry
from drivedoc.stores import DocumentStore, PaymentStore
from drivedoc.utils.exceptions import PaymentGatewayError


def _document(client, headers, expiry):
    res = client.post(
        "/documents",
        json={"country": "Nigeria", "type": "Passport", "number": "P123", "expiryDate": expiry},
        headers=headers,
    )
    assert res.status_code == 201, res.text
    return res.json()["document"]


def _verify(client, headers, reference, document_id):
    return client.post(
        "/payments/verify",
        json={"reference": reference, "documentId": document_id},
        headers=headers,
    )


class TestExtendedExpiry:
    def test_expired_document_extends_from_now(self):
        now = datetime(2025, 6, 1, 12, 0)
        assert extended_expiry(datetime(2024, 1, 1), now) == datetime(2026, 6, 1, 12, 0)

    def test_valid_document_extends_from_current_expiry(self):
        now = datetime(2025, 6, 1, 12, 0)
        assert extended_expiry(datetime(2025, 9, 15), now) == datetime(2026, 9, 15)

    def test_leap_day_falls_back_to_feb_28(self):
        now = datetime(2024, 1, 1)
        assert extended_expiry(datetime(2024, 2, 29), now) == datetime(2025, 2, 28)


def test_expired_document_is_renewed(client, register, auth_headers, gateway, services):
    user, token = register()
    document = _document(client, auth_headers(token), "2024-01-01T00:00:00Z")
    assert document["status"] == "expired"
    gateway.add("ref-1")

    res = _verify(client, auth_headers(token), "ref-1", document["id"])
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Payment verified"
    assert body["document"]["expiryDate"] == "2026-06-01T12:00:00"
    assert body["document"]["status"] == "valid"

    stored = services.documents.store.get(document["id"])
    assert stored.expiry_date == datetime(2026, 6, 1, 12, 0)
    assert stored.status == "valid"

    payment = services.payments.store.get_by_reference("ref-1")
    assert payment.user == user["id"]
    assert payment.document == document["id"]
    assert payment.status == "success"
    assert payment.transaction_id == "txn-ref-1"


def test_valid_document_extends_from_expiry(client, register, auth_headers, gateway):
    _, token = register()
    document = _document(client, auth_headers(token), "2025-09-15T00:00:00Z")
    gateway.add("ref-2")

    res = _verify(client, auth_headers(token), "ref-2", document["id"])
    assert res.json()["document"]["expiryDate"] == "2026-09-15T00:00:00"


def test_replayed_reference_is_not_applied_twice(client, register, auth_headers, gateway, services):
    _, token = register()
    document = _document(client, auth_headers(token), "2025-09-15T00:00:00Z")
    gateway.add("ref-3")

    assert _verify(client, auth_headers(token), "ref-3", document["id"]).status_code == 200
    res = _verify(client, auth_headers(token), "ref-3", document["id"])
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": ALREADY_PROCESSED}

    stored = services.documents.store.get(document["id"])
    assert stored.expiry_date == datetime(2026, 9, 15)
    assert services.payments.store.collection.count_documents({"reference": "ref-3"}) == 1


def test_unsuccessful_transaction_is_rejected(client, register, auth_headers, gateway, services):
    _, token = register()
    document = _document(client, auth_headers(token), "2025-09-15T00:00:00Z")
    gateway.add("ref-4", status="abandoned")

    res = _verify(client, auth_headers(token), "ref-4", document["id"])
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Payment verification failed"}
    assert services.payments.store.get_by_reference("ref-4") is None


def test_gateway_failure_is_server_error(client, register, auth_headers):
    _, token = register()
    document = _document(client, auth_headers(token), "2025-09-15T00:00:00Z")

    res = _verify(client, auth_headers(token), "unknown-ref", document["id"])
    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Verification failed"}


def test_document_must_exist_and_be_owned(client, register, auth_headers, gateway, services):
    _, token = register()
    _, other_token = register(email="bola@example.com")
    document = _document(client, auth_headers(token), "2025-09-15T00:00:00Z")
    gateway.add("ref-5")

    res = _verify(client, auth_headers(other_token), "ref-5", document["id"])
    assert res.status_code == 401
    assert services.payments.store.get_by_reference("ref-5") is None

    res = _verify(client, auth_headers(other_token), "ref-5", "64b7f0c2a1b2c3d4e5f60718")
    assert res.status_code == 404
    assert res.json()["message"] == "Document not found"


def test_renewed_status_follows_soon_window(db, gateway, clock):
    documents = DocumentService(DocumentStore(db), soon_days=400, clock=clock)
    payments = PaymentService(PaymentStore(db), documents, gateway, clock=clock)
    user = User(id="u1", full_name="Ada", email="ada@example.com", password_hash="x")
    document = documents.store.insert(
        Document(user="u1", country="Nigeria", type="Passport", number="P1", expiry_date=datetime(2024, 1, 1))
    )
    gateway.add("ref-6")

    outcome = payments.verify(user, "ref-6", document.id)

    assert outcome.document.expiry_date == datetime(2026, 6, 1, 12, 0)
    assert outcome.document.status == "expiring"
    assert documents.store.get(document.id).status == "expiring"


def test_verify_requires_login(client):
    res = client.post("/payments/verify", json={"reference": "r", "documentId": "d"})
    assert res.status_code == 401


class TestPaystackGateway:
    @pytest.fixture(autouse=True)
    def no_retry_wait(self, monkeypatch):
        monkeypatch.setattr(PaystackGateway._get.retry, "wait", wait_none())

    def _response(self, body):
        response = Mock()
        response.json.return_value = body
        response.raise_for_status.return_value = None
        return response

    def test_verify_parses_transaction(self):
        session = Mock()
        session.get.return_value = self._response(
            {"status": True, "data": {"id": 998, "status": "success", "amount": 250000, "currency": "NGN"}}
        )
        gateway = PaystackGateway("sk_test", session=session)

        transaction = gateway.verify("ref-1")
        assert transaction.succeeded
        assert transaction.amount == 250000
        assert transaction.transaction_id == "998"

        url = session.get.call_args[0][0]
        assert url == "https://api.paystack.co/transaction/verify/ref-1"
        assert session.get.call_args[1]["headers"] == {"Authorization": "Bearer sk_test"}

    def test_transient_errors_are_retried(self):
        session = Mock()
        session.get.side_effect = [
            requests.exceptions.ConnectionError("reset"),
            self._response({"data": {"id": 1, "status": "success", "amount": 100, "currency": "NGN"}}),
        ]
        gateway = PaystackGateway("sk_test", session=session)

        assert gateway.verify("ref-1").succeeded
        assert session.get.call_count == 2

    def test_gives_up_after_three_attempts(self):
        session = Mock()
        session.get.side_effect = requests.exceptions.Timeout("slow")
        gateway = PaystackGateway("sk_test", session=session)

        with pytest.raises(PaymentGatewayError) as exc:
            gateway.verify("ref-1")
        assert exc.value.message == "Verification failed"
        assert session.get.call_count == 3

    def test_http_error_is_not_retried(self):
        response = Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("400 Bad Request")
        session = Mock()
        session.get.return_value = response
        gateway = PaystackGateway("sk_test", session=session)

        with pytest.raises(PaymentGatewayError):
            gateway.verify("ref-1")
        assert session.get.call_count == 1

    def test_response_without_data(self):
        session = Mock()
        session.get.return_value = self._response({"status": False, "message": "Transaction reference not found"})
        with pytest.raises(PaymentGatewayError):
            PaystackGateway("sk_test", session=session).verify("ref-1")

    def test_missing_secret_key(self):
        session = Mock()
        with pytest.raises(PaymentGatewayError):
            PaystackGateway("", session=session).verify("ref-1")
        session.get.assert_not_called()
