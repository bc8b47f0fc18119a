"""Document records and request payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from ..utils.timeutil import to_naive_utc, utcnow
from .base import CamelModel, MongoModel


class DocumentStatus(str, Enum):
    """Expiry status, always derived from expiry_date"""
    VALID = "valid"
    EXPIRING = "expiring"
    EXPIRED = "expired"


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    return to_naive_utc(value) if value is not None else None


class Document(MongoModel):
    """A user-owned identity or vehicle document (licence, passport, ...)"""
    user: str
    country: str
    type: str
    number: str
    issue_date: Optional[datetime] = None
    expiry_date: datetime
    status: DocumentStatus = DocumentStatus.VALID
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("issue_date", "expiry_date", "created_at")
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive(value)


class DocumentCreate(CamelModel):
    country: str = Field(min_length=1)
    type: str = Field(min_length=1)
    number: str = Field(min_length=1)
    issue_date: Optional[datetime] = None
    expiry_date: datetime

    @field_validator("issue_date", "expiry_date")
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive(value)


class DocumentUpdate(CamelModel):
    """Partial update. status is not accepted; it is recomputed on every write."""
    country: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = Field(default=None, min_length=1)
    number: Optional[str] = Field(default=None, min_length=1)
    issue_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None

    @field_validator("issue_date", "expiry_date")
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive(value)
