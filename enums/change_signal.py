from enum import Enum

from enums.collection_kind import CollectionKind


class ChangeSignal(Enum):
    """
    Payload-less change notifications, one per collection.

    Subscribers treat a signal as "re-read state"; it never carries data.
    """
    CART_CHANGED = "cart-changed"
    WISHLIST_CHANGED = "wishlist-changed"

    @staticmethod
    def for_collection(kind: CollectionKind) -> "ChangeSignal":
        if kind == CollectionKind.CART:
            return ChangeSignal.CART_CHANGED
        return ChangeSignal.WISHLIST_CHANGED
