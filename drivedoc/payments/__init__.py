from .gateway import GatewayTransaction, PaystackGateway
from .service import ALREADY_PROCESSED, PaymentService, VerificationOutcome, extended_expiry

__all__ = [
    "ALREADY_PROCESSED",
    "GatewayTransaction",
    "PaymentService",
    "PaystackGateway",
    "VerificationOutcome",
    "extended_expiry",
]
