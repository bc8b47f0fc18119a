"""Signup, login, the auth guard and OAuth sign-in."""

from unittest.mock import patch

import pytest

from drivedoc.auth import OAuthProfile, TokenSigner, hash_password, verify_password
from drivedoc.auth.service import WEAK_PASSWORD_MESSAGE
from drivedoc.utils.exceptions import ConfigError

STRONG_PASSWORD = "Passw0rdX"


def _signup_body(email="ada@example.com", password=STRONG_PASSWORD):
    return {
        "fullName": "Ada Obi",
        "email": email,
        "phone": "+2348000000000",
        "country": "Nigeria",
        "password": password,
    }


def test_signup_sets_cookie_and_returns_public_user(client):
    res = client.post("/auth/signup", json=_signup_body())
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == "ada@example.com"
    assert set(body["user"]) == {"id", "fullName", "email", "phone", "country"}
    assert res.cookies.get("token") == body["token"]

    res_me = client.get("/auth/me")
    assert res_me.status_code == 200, res_me.text
    assert res_me.json()["user"]["id"] == body["user"]["id"]


def test_cookie_attributes(client):
    res = client.post("/auth/signup", json=_signup_body())
    cookie = res.headers["set-cookie"].lower()
    assert "httponly" in cookie
    assert "samesite=strict" in cookie
    assert "max-age=604800" in cookie


def test_duplicate_email_rejected(client):
    assert client.post("/auth/signup", json=_signup_body()).status_code == 201
    res = client.post("/auth/signup", json=_signup_body(email="ADA@example.com"))
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "User already exists with this email"}


@pytest.mark.parametrize("password", ["short1A", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"])
def test_weak_password_rejected(client, password):
    res = client.post("/auth/signup", json=_signup_body(password=password))
    assert res.status_code == 400
    assert res.json()["message"] == WEAK_PASSWORD_MESSAGE


def test_login(client, register):
    user, _ = register()

    res = client.post("/auth/login", json={"email": "Ada@Example.com", "password": STRONG_PASSWORD})
    assert res.status_code == 200, res.text
    assert res.json()["user"]["id"] == user["id"]
    assert res.cookies.get("token")

    res = client.post("/auth/login", json={"email": "ada@example.com", "password": "Wrong0Pass"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid credentials"

    res = client.post("/auth/login", json={"email": "nobody@example.com", "password": STRONG_PASSWORD})
    assert res.status_code == 401

    res = client.post("/auth/login", json={"email": "ada@example.com"})
    assert res.status_code == 400
    assert res.json()["message"] == "Please provide email and password"


def test_bearer_header_fallback(client, register, auth_headers):
    user, token = register()
    assert "token" not in client.cookies

    res = client.get("/auth/me", headers=auth_headers(token))
    assert res.status_code == 200
    assert res.json()["user"]["id"] == user["id"]


def test_cookie_takes_precedence_over_header(client, register, auth_headers):
    ada, _ = register()
    _, bola_token = register(email="bola@example.com")

    client.post("/auth/login", json={"email": "ada@example.com", "password": STRONG_PASSWORD})
    res = client.get("/auth/me", headers=auth_headers(bola_token))
    assert res.json()["user"]["id"] == ada["id"]


def test_guard_rejects_missing_and_tampered_tokens(client, register, auth_headers):
    _, token = register()

    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": token}).status_code == 401
    assert client.get("/auth/me", headers=auth_headers(token[:-2] + "xx")).status_code == 401
    assert client.get("/auth/me", headers=auth_headers("garbage")).status_code == 401


def test_guard_rejects_deleted_user(client, register, auth_headers, services):
    user, token = register()
    services.users.delete(user["id"])

    res = client.get("/auth/me", headers=auth_headers(token))
    assert res.status_code == 401
    assert res.json()["message"] == "Not authorized. User no longer exists."


def test_logout_clears_cookie(client):
    client.post("/auth/signup", json=_signup_body())
    assert client.get("/auth/me").status_code == 200

    res = client.post("/auth/logout")
    assert res.status_code == 200
    assert client.get("/auth/me").status_code == 401


def test_token_expires():
    signer = TokenSigner("secret", expiry_days=7)
    issued_at = 1_700_000_000
    with patch("itsdangerous.timed.TimestampSigner.get_timestamp", return_value=issued_at):
        token = signer.issue("64b7f0c2a1b2c3d4e5f60718")

    with patch("itsdangerous.timed.TimestampSigner.get_timestamp", return_value=issued_at + 6 * 86400):
        assert signer.read(token) == "64b7f0c2a1b2c3d4e5f60718"
    with patch("itsdangerous.timed.TimestampSigner.get_timestamp", return_value=issued_at + 8 * 86400):
        assert signer.read(token) is None


def test_token_from_another_secret_is_rejected():
    token = TokenSigner("secret-a").issue("user-1")
    assert TokenSigner("secret-b").read(token) is None
    assert TokenSigner("secret-a").read(token) == "user-1"


def test_signer_requires_secret():
    with pytest.raises(ConfigError):
        TokenSigner("")


def test_password_hashing():
    hashed = hash_password(STRONG_PASSWORD)
    assert hashed != STRONG_PASSWORD
    assert verify_password(STRONG_PASSWORD, hashed)
    assert not verify_password("other", hashed)
    assert not verify_password(STRONG_PASSWORD, "not-a-bcrypt-hash")


class TestOAuth:
    def test_google_creates_user_once(self, client, oauth, services):
        oauth.profiles[("google", "g-token")] = OAuthProfile(email="gina@example.com", full_name="Gina")

        res = client.post("/auth/oauth/google", json={"accessToken": "g-token"})
        assert res.status_code == 200, res.text
        user = res.json()["user"]
        assert user["email"] == "gina@example.com"
        assert user["phone"] == "N/A"
        assert user["country"] == "Unknown"

        res = client.post("/auth/oauth/google", json={"accessToken": "g-token"})
        assert res.json()["user"]["id"] == user["id"]
        assert services.users.collection.count_documents({"email": "gina@example.com"}) == 1

    def test_existing_account_is_reused(self, client, register, oauth):
        user, _ = register()
        oauth.profiles[("facebook", "fb-token")] = OAuthProfile(email="ada@example.com", full_name="Ada")

        res = client.post("/auth/oauth/facebook", json={"accessToken": "fb-token"})
        assert res.status_code == 200
        assert res.json()["user"]["id"] == user["id"]

    def test_missing_token(self, client):
        res = client.post("/auth/oauth/google", json={})
        assert res.status_code == 400
        assert res.json()["message"] == "Missing accessToken"

    def test_provider_rejects_token(self, client):
        res = client.post("/auth/oauth/google", json={"accessToken": "bad"})
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid Google token"

    def test_facebook_profile_without_email(self, client, oauth):
        oauth.profiles[("facebook", "fb-token")] = OAuthProfile(email=None, full_name="No Mail")
        res = client.post("/auth/oauth/facebook", json={"accessToken": "fb-token"})
        assert res.status_code == 400
        assert res.json()["message"] == "Email not available from Facebook"


def test_production_cookie_is_secure(settings, db, gateway, sender, oauth, clock):
    from fastapi.testclient import TestClient

    from web.main import create_app

    settings = settings.model_copy(update={"app": settings.app.model_copy(update={"environment": "production"})})
    app = create_app(settings=settings, db=db, gateway=gateway, push_sender=sender, oauth=oauth, clock=clock)
    with TestClient(app) as c:
        res = c.post("/auth/signup", json=_signup_body())
    assert res.status_code == 201
    assert "secure" in res.headers["set-cookie"].lower()
