"""
Signed bearer credentials.

The credential is an itsdangerous URL-safe timed signature over
{"id": <user id>}: tampering breaks the HMAC and max_age enforces expiry.
"""

from __future__ import annotations

from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..utils.exceptions import ConfigError

SECONDS_PER_DAY = 24 * 60 * 60


class TokenSigner:
    def __init__(self, secret: str, expiry_days: int = 7, salt: str = "drivedoc-auth"):
        if not secret:
            raise ConfigError("JWT_SECRET must be set to sign authentication tokens.")
        self.max_age = expiry_days * SECONDS_PER_DAY
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=salt)

    def issue(self, user_id: str) -> str:
        return self._serializer.dumps({"id": user_id})

    def read(self, token: str) -> Optional[str]:
        """User id named by a valid, unexpired token; None otherwise."""
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except (SignatureExpired, BadSignature):
            return None
        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            return None
        return data["id"]
