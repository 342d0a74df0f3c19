from enum import Enum


class CollectionKind(Enum):
    """The two collections managed by the commerce engine."""
    CART = "CART"
    WISHLIST = "WISHLIST"
