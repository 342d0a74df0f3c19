import logging

import config
from models.cart import CartDTO
from models.pricing import PricingResultDTO, ShippingConfigDTO
from models.promotion import PromotionPreviewDTO

logger = logging.getLogger(__name__)


def _non_negative(value: float | None) -> float:
    if value is None or value < 0:
        return 0.0
    return float(value)


class PricingService:
    """Service for checkout pricing: promotions, coupon and shipping stacked in a fixed order."""

    @staticmethod
    def resolve_shipping_config(preview: PromotionPreviewDTO | None) -> ShippingConfigDTO:
        """
        Shipping fee and free-shipping threshold for this checkout.

        Values from the promotion preview win; whatever it does not carry
        falls back to config.SHIPPING_FEE / config.FREE_SHIPPING_THRESHOLD.
        """
        shipping_fee = preview.shipping_fee if preview else None
        threshold = preview.free_shipping_threshold if preview else None
        return ShippingConfigDTO(
            shipping_fee=shipping_fee if shipping_fee is not None else config.SHIPPING_FEE,
            free_shipping_threshold=threshold if threshold is not None else config.FREE_SHIPPING_THRESHOLD,
        )

    @staticmethod
    def calculate(cart: CartDTO, preview: PromotionPreviewDTO | None,
                  coupon_discount: float, shipping_config: ShippingConfigDTO) -> PricingResultDTO:
        """
        Calculate the final order amount.

        Pure: no I/O, inputs are not modified.

        Algorithm:
        1. subtotal = cart total
        2. Item promotion discount = sum of discount amounts of DISCOUNT and
           BUY_X_PAY_Y item promotions. BOGO / BUY_X_GET_Y grant extra free
           items instead, which were never in the subtotal.
        3. Order promotion discount from the preview (at most one ORDER promotion)
        4. Coupon discount as validated by the server
        5. subtotal_after_discount = subtotal - (2) - (3) - (4), floored at 0
        6. Free shipping when subtotal_after_discount >= threshold
        7. final_amount = subtotal_after_discount + shipping fee

        Example (fee 30 000, threshold 500 000):
            subtotal 500 000, item promo 50 000, coupon 20 000
            -> 430 000 after discount, not free -> 460 000

        Args:
            cart: Cart snapshot being checked out
            preview: Promotion preview, or None when it could not be loaded
            coupon_discount: Discount of the applied coupon (0 if none)
            shipping_config: Fee and threshold, see resolve_shipping_config()

        Returns:
            PricingResultDTO with the full breakdown
        """
        subtotal = _non_negative(cart.total)

        item_promotion_discount = 0.0
        order_promotion_discount = 0.0
        free_items = []
        if preview is not None:
            item_promotion_discount = sum(
                _non_negative(promotion.discount_amount)
                for promotion in preview.item_promotions
                if promotion.promotion_type is not None and promotion.promotion_type.reduces_subtotal
            )
            order_promotion_discount = _non_negative(preview.order_discount_amount)
            free_items = list(preview.free_items)

        coupon_discount = _non_negative(coupon_discount)
        total_discount = item_promotion_discount + order_promotion_discount + coupon_discount

        subtotal_after_discount = max(0.0, subtotal - total_discount)

        fee = _non_negative(shipping_config.shipping_fee)
        threshold = _non_negative(shipping_config.free_shipping_threshold)
        is_free_shipping = subtotal_after_discount >= threshold
        shipping_fee = 0.0 if is_free_shipping else fee

        final_amount = subtotal_after_discount + shipping_fee

        logger.debug(
            f"[Pricing] subtotal={subtotal} item={item_promotion_discount} order={order_promotion_discount} "
            f"coupon={coupon_discount} shipping={shipping_fee} final={final_amount}"
        )

        return PricingResultDTO(
            subtotal=subtotal,
            item_promotion_discount=item_promotion_discount,
            order_promotion_discount=order_promotion_discount,
            coupon_discount=coupon_discount,
            total_discount=total_discount,
            subtotal_after_discount=subtotal_after_discount,
            is_free_shipping=is_free_shipping,
            shipping_fee=shipping_fee,
            final_amount=final_amount,
            free_items=free_items,
            amount_to_free_shipping=max(0.0, threshold - subtotal_after_discount),
            promotion_applied=preview is not None,
        )
