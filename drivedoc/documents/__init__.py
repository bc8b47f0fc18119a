"""Document records and their expiry-status lifecycle."""

from .service import DocumentService
from .status import compute_status, days_until_expiry

__all__ = ["DocumentService", "compute_status", "days_until_expiry"]
