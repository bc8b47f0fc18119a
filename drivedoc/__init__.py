"""DriveDoc: document expiry tracking, lesson bookings and renewals."""

__version__ = "1.0.0"
