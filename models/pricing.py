from pydantic import BaseModel, Field

from models.promotion import FreeItemDTO


class ShippingConfigDTO(BaseModel):
    shipping_fee: float
    free_shipping_threshold: float


class PricingResultDTO(BaseModel):
    """
    Checkout pricing breakdown.

    Invariant: final_amount == subtotal_after_discount + shipping_fee, and
    subtotal_after_discount is never negative.
    """
    subtotal: float
    item_promotion_discount: float
    order_promotion_discount: float
    coupon_discount: float
    total_discount: float
    subtotal_after_discount: float
    is_free_shipping: bool
    shipping_fee: float
    final_amount: float
    free_items: list[FreeItemDTO] = Field(default_factory=list)
    amount_to_free_shipping: float = 0.0  # For "add X more for free shipping" hints
    promotion_applied: bool = False  # False when the preview was unavailable
