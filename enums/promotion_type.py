from enum import Enum


class PromotionType(str, Enum):
    DISCOUNT = "DISCOUNT"          # Percentage or fixed amount off
    BOGO = "BOGO"                  # Buy one, get one free
    BUY_X_GET_Y = "BUY_X_GET_Y"    # For every X+Y items, Y are free
    BUY_X_PAY_Y = "BUY_X_PAY_Y"    # For every X items, pay for Y

    @property
    def reduces_subtotal(self) -> bool:
        """
        Whether the promotion's discount amount is subtracted from the subtotal.

        BOGO and BUY_X_GET_Y grant extra zero-charge items instead, which were
        never part of the subtotal.
        """
        return self in (PromotionType.DISCOUNT, PromotionType.BUY_X_PAY_Y)
