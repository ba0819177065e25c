"""
Domain errors raised by the service layer.
Routers translate them into HTTP status codes.
"""
from typing import Optional


class NotFoundError(ValueError):
    """Requested row does not exist (404)."""


class ConflictError(ValueError):
    """Row clashes with an existing one (409)."""


class InvalidRequestError(ValueError):
    """Request is well-formed but cannot be honoured (400)."""


class TokenError(ValueError):
    """Refresh token is unknown, expired or fails verification (403)."""


class PaymentGatewayError(Exception):
    """The payment gateway rejected the call or could not be reached."""

    def __init__(self, message: str, status_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidSignatureError(ValueError):
    """Gateway notification signature does not match (403)."""
