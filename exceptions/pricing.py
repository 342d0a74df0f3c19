"""
Pricing-related exceptions.
"""

from enums.failure_kind import FailureKind
from .base import CommerceException


class PricingComputationException(CommerceException):
    """
    Raised when a promotion preview payload cannot be interpreted at all.

    Never escapes the checkout flow: the preview is dropped and pricing
    falls back to raw cart totals.
    """

    kind = FailureKind.PRICING_COMPUTATION_ERROR

    def __init__(self, reason: str):
        super().__init__(f"Unusable promotion preview: {reason}", details={'reason': reason})
        self.reason = reason
