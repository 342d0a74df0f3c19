"""
Error Handler Utility

Maps commerce engine exceptions to user-facing messages.

Usage:
    from utils.error_handler import handle_commerce_error

    try:
        await session.checkout.apply_coupon(code)
    except CommerceException as e:
        show_toast(handle_commerce_error(e))
"""

import logging

from enums.failure_kind import FailureKind
from exceptions import CommerceException

logger = logging.getLogger(__name__)

# One entry per FailureKind; test_error_handler checks the mapping stays exhaustive
ERROR_MESSAGES: dict[FailureKind, str] = {
    FailureKind.STORAGE_UNAVAILABLE: "Your cart could not be saved on this device. Changes may be lost after reload.",
    FailureKind.REMOTE_SYNC_FAILURE: "We could not merge your saved items into your account. They are kept and will be merged next time.",
    FailureKind.REMOTE_REQUEST_FAILURE: "The store is not reachable right now. Please try again.",
    FailureKind.STOCK_EXCEEDED: "Only {available} left in stock.",
    FailureKind.COUPON_INVALID: "{message}",
    FailureKind.PRICING_COMPUTATION_ERROR: "Promotions could not be applied. Prices shown without promotions.",
    FailureKind.EMPTY_CART: "Your cart is empty.",
}

UNEXPECTED_ERROR_MESSAGE = "Something went wrong. Please try again."


def handle_commerce_error(exception: CommerceException) -> str:
    """
    Convert a commerce exception to a user-friendly message.

    Args:
        exception: Exception raised (or absorbed and re-raised) by the engine

    Returns:
        Message string, formatted with the exception's context

    Example:
        >>> handle_commerce_error(StockExceededException(7, requested=10, available=5))
        'Only 5 left in stock.'
    """
    logger.warning(f"[ErrorHandler] {type(exception).__name__} - {exception}")

    kind = getattr(exception, "kind", None)
    template = ERROR_MESSAGES.get(kind)
    if template is None:
        logger.error(f"[ErrorHandler] Unmapped exception type: {type(exception).__name__}")
        return UNEXPECTED_ERROR_MESSAGE

    exception_data = {'message': exception.message}
    if hasattr(exception, 'available'):
        exception_data['available'] = exception.available
    if hasattr(exception, 'requested'):
        exception_data['requested'] = exception.requested

    try:
        return template.format(**exception_data)
    except KeyError as e:
        logger.error(f"[ErrorHandler] Missing format parameter in error message: {e}")
        return template


def handle_unexpected_error(exception: Exception) -> str:
    """Handle exceptions outside the CommerceException hierarchy. Logs the traceback."""
    logger.error(f"[ErrorHandler] Unexpected error: {type(exception).__name__} - {exception}", exc_info=True)
    return UNEXPECTED_ERROR_MESSAGE
