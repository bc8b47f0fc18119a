"""Resolve OAuth provider access tokens into profiles (Google, Facebook)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..utils.logger import get_logger

logger = get_logger(__name__)

GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
FACEBOOK_ME_URL = "https://graph.facebook.com/me"


class OAuthProfileError(Exception):
    """Provider rejected the token or returned an unusable profile"""
    pass


@dataclass(frozen=True)
class OAuthProfile:
    email: Optional[str]
    full_name: str


class OAuthClient:
    def __init__(self, timeout: int = 15, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_json(self, url: str, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("OAuth profile request failed", url=url, error=str(e))
            raise OAuthProfileError("Profile lookup failed")
        if not isinstance(data, dict):
            raise OAuthProfileError("Unexpected profile response")
        return data

    def google_profile(self, access_token: str) -> OAuthProfile:
        data = self._get_json(GOOGLE_USERINFO_URL, {"access_token": access_token})
        if data.get("error") or not data.get("email"):
            raise OAuthProfileError("Invalid Google token")
        return OAuthProfile(
            email=data["email"],
            full_name=data.get("name") or data.get("given_name") or "Google User",
        )

    def facebook_profile(self, access_token: str) -> OAuthProfile:
        data = self._get_json(
            FACEBOOK_ME_URL, {"fields": "id,name,email", "access_token": access_token}
        )
        if data.get("error"):
            raise OAuthProfileError("Invalid Facebook token")
        return OAuthProfile(email=data.get("email"), full_name=data.get("name") or "Facebook User")
