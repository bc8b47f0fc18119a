"""
Expiry status rules.

days_until_expiry is the millisecond difference rounded up to whole days.
A document is expired only once its expiry instant has passed; until then
it is expiring when days_until_expiry is within the soon window (inclusive),
so one that expires later today (days_until_expiry == 0) is still expiring.
"""

from __future__ import annotations

import math
from datetime import datetime

from ..models.document import DocumentStatus

DEFAULT_SOON_DAYS = 30
_MS_PER_DAY = 24 * 60 * 60 * 1000


def days_until_expiry(expiry: datetime, now: datetime) -> int:
    delta_ms = (expiry - now).total_seconds() * 1000
    return math.ceil(delta_ms / _MS_PER_DAY)


def compute_status(expiry: datetime, now: datetime, soon_days: int = DEFAULT_SOON_DAYS) -> DocumentStatus:
    if expiry < now:
        return DocumentStatus.EXPIRED
    if days_until_expiry(expiry, now) <= soon_days:
        return DocumentStatus.EXPIRING
    return DocumentStatus.VALID
