from enum import Enum


class MutationState(Enum):
    """
    State of a single cart/wishlist mutation attempt.

    OPTIMISTIC -> CONFIRMED is the only transition. Guest mutations stay
    OPTIMISTIC (applied locally, never seen by the server); authenticated
    mutations become CONFIRMED once the Remote Store returns its snapshot.
    """
    OPTIMISTIC = "OPTIMISTIC"
    CONFIRMED = "CONFIRMED"
