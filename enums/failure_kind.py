from enum import Enum


class FailureKind(Enum):
    """Closed set of failure kinds raised or absorbed by the commerce engine."""
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"              # Absorbed by LocalStore
    REMOTE_SYNC_FAILURE = "REMOTE_SYNC_FAILURE"              # Absorbed by SyncCoordinator
    REMOTE_REQUEST_FAILURE = "REMOTE_REQUEST_FAILURE"        # Propagated to caller
    STOCK_EXCEEDED = "STOCK_EXCEEDED"                        # Surfaced to user
    COUPON_INVALID = "COUPON_INVALID"                        # Surfaced to user
    PRICING_COMPUTATION_ERROR = "PRICING_COMPUTATION_ERROR"  # Degrades to no promotions
    EMPTY_CART = "EMPTY_CART"                                # Surfaced to user
