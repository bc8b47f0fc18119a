"""Authentication: password hashing, signed credentials, OAuth sign-in."""

from .oauth import OAuthClient, OAuthProfile, OAuthProfileError
from .passwords import hash_password, verify_password
from .service import AuthService
from .tokens import TokenSigner

__all__ = [
    "AuthService",
    "OAuthClient",
    "OAuthProfile",
    "OAuthProfileError",
    "TokenSigner",
    "hash_password",
    "verify_password",
]
