"""
Coupon-related exceptions.
"""

from enums.failure_kind import FailureKind
from .base import CommerceException


class CouponInvalidException(CommerceException):
    """Raised when the server rejects a coupon code. Carries the server's message."""

    kind = FailureKind.COUPON_INVALID

    DEFAULT_MESSAGE = "Coupon is invalid or has expired"

    def __init__(self, code: str, server_message: str | None = None):
        super().__init__(
            server_message or self.DEFAULT_MESSAGE,
            details={'code': code}
        )
        self.code = code
