"""
Custom exceptions for the commerce engine.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the engine. Every concrete exception is tagged with a FailureKind.

Exception Hierarchy:
--------------------
CommerceException (base)
├── CartException
│   ├── StockExceededException        (STOCK_EXCEEDED)
│   └── EmptyCartException            (EMPTY_CART)
├── StorageUnavailableException       (STORAGE_UNAVAILABLE)
├── RemoteStoreException              (REMOTE_REQUEST_FAILURE)
├── RemoteSyncFailureException        (REMOTE_SYNC_FAILURE)
├── CouponInvalidException            (COUPON_INVALID)
└── PricingComputationException       (PRICING_COMPUTATION_ERROR)

Usage:
------
Services raise specific exceptions:
    raise StockExceededException(product_id=7, requested=10, available=5)

Callers catch and display user-friendly messages:
    try:
        await checkout.apply_coupon(code)
    except CommerceException as e:
        message = handle_commerce_error(e)
"""

from .base import CommerceException
from .cart import CartException, StockExceededException, EmptyCartException
from .storage import StorageUnavailableException
from .remote import RemoteStoreException, RemoteSyncFailureException
from .coupon import CouponInvalidException
from .pricing import PricingComputationException

__all__ = [
    # Base
    'CommerceException',

    # Cart
    'CartException',
    'StockExceededException',
    'EmptyCartException',

    # Storage
    'StorageUnavailableException',

    # Remote
    'RemoteStoreException',
    'RemoteSyncFailureException',

    # Coupon
    'CouponInvalidException',

    # Pricing
    'PricingComputationException',
]
