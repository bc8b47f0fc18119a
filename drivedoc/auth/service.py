"""
Account service: signup, login, OAuth sign-in and credential resolution.

Users live in MongoDB (see stores.users); credentials are stateless signed
tokens (see auth.tokens), so resolving one always re-reads the user and a
deleted account stops authenticating immediately.
"""

from __future__ import annotations

import secrets
from typing import Optional, Tuple

from ..models.user import LoginRequest, SignupRequest, User, is_strong_password
from ..stores.users import UserStore
from ..utils.exceptions import AuthenticationError, ConflictError, ValidationError
from ..utils.logger import get_logger
from .oauth import OAuthClient, OAuthProfileError
from .passwords import hash_password, verify_password
from .tokens import TokenSigner

logger = get_logger(__name__)

WEAK_PASSWORD_MESSAGE = (
    "Password must contain at least 8 characters, including uppercase, lowercase, and number"
)


class AuthService:
    def __init__(self, users: UserStore, signer: TokenSigner, oauth: Optional[OAuthClient] = None):
        self.users = users
        self.signer = signer
        self.oauth = oauth or OAuthClient()

    def signup(self, payload: SignupRequest) -> Tuple[User, str]:
        if self.users.get_by_email(payload.email) is not None:
            raise ConflictError("User already exists with this email")
        if not is_strong_password(payload.password):
            raise ValidationError(WEAK_PASSWORD_MESSAGE)

        user = self.users.create(
            User(
                full_name=payload.full_name,
                email=payload.email,
                phone=payload.phone,
                country=payload.country,
                password_hash=hash_password(payload.password),
            )
        )
        logger.info("User registered", user_id=user.id)
        return user, self.signer.issue(user.id)

    def login(self, payload: LoginRequest) -> Tuple[User, str]:
        if not payload.email or not payload.password:
            raise ValidationError("Please provide email and password")
        user = self.users.get_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.info("Login failed", email_domain=payload.email.rsplit("@", 1)[-1])
            raise AuthenticationError("Invalid credentials")
        return user, self.signer.issue(user.id)

    def oauth_login(self, provider: str, access_token: Optional[str]) -> Tuple[User, str]:
        """Find or create the user behind a Google / Facebook access token."""
        if not access_token:
            raise ValidationError("Missing accessToken")
        try:
            if provider == "google":
                profile = self.oauth.google_profile(access_token)
            else:
                profile = self.oauth.facebook_profile(access_token)
        except OAuthProfileError as e:
            raise AuthenticationError(str(e))
        if not profile.email:
            raise ValidationError("Email not available from Facebook")

        user = self.users.get_by_email(profile.email)
        if user is None:
            # Random password; the account is only reachable through OAuth until reset
            random_password = secrets.token_hex(16) + "Aa1"
            user = self.users.create(
                User(
                    full_name=profile.full_name,
                    email=profile.email,
                    password_hash=hash_password(random_password),
                )
            )
            logger.info("User registered via OAuth", user_id=user.id, provider=provider)
        return user, self.signer.issue(user.id)

    def resolve(self, token: Optional[str]) -> User:
        """
        Resolve a credential to its user.

        Raises AuthenticationError when the token is missing, fails
        verification, is expired, or names a user that no longer exists.
        """
        if not token:
            raise AuthenticationError()
        user_id = self.signer.read(token)
        if user_id is None:
            raise AuthenticationError()
        user = self.users.get_by_id(user_id)
        if user is None:
            raise AuthenticationError("Not authorized. User no longer exists.")
        return user
