"""Lesson booking records and request payloads."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Literal, Optional

from pydantic import Field

from ..utils.timeutil import utcnow
from .base import CamelModel, MongoModel

LessonType = Literal[
    "Standard Lesson",
    "Highway Logic",
    "Parking Mastery",
    "Night Driving",
    "Test Preparation",
]

TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Booking(MongoModel):
    user: str
    date: str  # ISO date (YYYY-MM-DD)
    start_time: str  # HH:MM
    lesson_type: LessonType = "Standard Lesson"
    status: BookingStatus = BookingStatus.CONFIRMED
    notes: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=utcnow)


class BookingCreate(CamelModel):
    date: dt.date
    start_time: str = Field(pattern=TIME_OF_DAY_PATTERN)
    lesson_type: LessonType = "Standard Lesson"
    notes: Optional[str] = Field(default=None, max_length=500)
