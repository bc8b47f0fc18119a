"""User data models for authentication and push subscriptions"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import EmailStr, Field, field_validator

from ..utils.timeutil import utcnow
from .base import CamelModel, MongoModel

# At least 8 characters with upper case, lower case and a digit
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}$")


class PushSubscription(CamelModel):
    """Browser push endpoint; enabled gates delivery without removing it"""
    endpoint: str
    keys: Dict[str, str] = Field(default_factory=dict)
    enabled: bool = True


class User(MongoModel):
    full_name: str
    email: EmailStr
    phone: str = "N/A"
    country: str = "Unknown"
    password_hash: str
    push_subscriptions: List[PushSubscription] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    def enabled_subscriptions(self) -> List[PushSubscription]:
        return [s for s in self.push_subscriptions if s.enabled]

    def public(self) -> Dict[str, Optional[str]]:
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "country": self.country,
        }


class SignupRequest(CamelModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    country: str = Field(min_length=1)
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class OAuthRequest(CamelModel):
    access_token: Optional[str] = None


class SubscriptionRequest(CamelModel):
    endpoint: str = Field(min_length=1)
    keys: Dict[str, str] = Field(default_factory=dict)


class EndpointRequest(CamelModel):
    endpoint: str = Field(min_length=1)


def is_strong_password(password: str) -> bool:
    return bool(PASSWORD_PATTERN.match(password or ""))
