"""Custom exceptions for the DriveDoc backend"""

from typing import Optional


class DriveDocError(Exception):
    """Base exception for DriveDoc"""

    status_code: int = 500
    default_message: str = "Server error. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DriveDocError):
    """Missing or malformed input"""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(DriveDocError):
    """Write rejected because it collides with an existing record"""

    status_code = 400
    default_message = "Resource already exists"


class AuthenticationError(DriveDocError):
    """Missing, invalid or expired credential, or ownership mismatch"""

    status_code = 401
    default_message = "Not authorized to access this route"


class NotFoundError(DriveDocError):
    """Unknown resource id"""

    status_code = 404
    default_message = "Resource not found"


class PaymentGatewayError(DriveDocError):
    """Payment gateway could not confirm a transaction"""

    status_code = 500
    default_message = "Verification failed"


class ConfigError(DriveDocError):
    """Configuration error"""
    pass
