"""
Cart-related exceptions.
"""

from enums.failure_kind import FailureKind
from .base import CommerceException


class CartException(CommerceException):
    """Base exception for cart-related errors."""
    pass


class StockExceededException(CartException):
    """Raised when a call site rejects (rather than clamps) a quantity above stock."""

    kind = FailureKind.STOCK_EXCEEDED

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_id}: requested {requested}, available {available}",
            details={'product_id': product_id, 'requested': requested, 'available': available}
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class EmptyCartException(CartException):
    """Raised when trying to place an order with an empty cart."""

    kind = FailureKind.EMPTY_CART

    def __init__(self):
        super().__init__("Cart is empty")
