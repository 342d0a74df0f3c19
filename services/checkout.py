"""
Checkout session: promotion preview, at most one coupon, pricing summary
and order placement for a single cart.
"""

import logging

from enums.change_signal import ChangeSignal
from exceptions.base import CommerceException
from exceptions.cart import EmptyCartException
from exceptions.coupon import CouponInvalidException
from exceptions.remote import RemoteStoreException
from models.cart import CartDTO
from models.coupon import CouponResultDTO
from models.order import CreateOrderRequestDTO, OrderDTO
from models.pricing import PricingResultDTO
from models.promotion import PromotionPreviewDTO
from services.local_store import LocalCartStore
from services.pricing import PricingService
from services.remote_store import CouponClient, PromotionClient, OrderClient, RemoteCartClient

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Holds the state of one checkout.

    The cart defaults to the Local Store cart; authenticated sessions pin
    the Remote Store cart through use_cart(). A pinned cart is re-read from
    the server before an order is placed.

    The promotion preview and the applied coupon belong to the cart they
    were computed for: both are dropped whenever that cart changes.
    """

    BLANK_CODE_MESSAGE = "Please enter a coupon code"

    def __init__(self, local_cart: LocalCartStore, coupons: CouponClient,
                 promotions: PromotionClient, orders: OrderClient,
                 remote_cart: RemoteCartClient | None = None):
        self.local_cart = local_cart
        self.coupons = coupons
        self.promotions = promotions
        self.orders = orders
        self.remote_cart = remote_cart
        self.preview: PromotionPreviewDTO | None = None
        self.applied_coupon: CouponResultDTO | None = None
        self._cart: CartDTO | None = None
        local_cart.notifier.subscribe(ChangeSignal.CART_CHANGED, self._on_local_cart_changed)

    def _invalidate(self) -> None:
        if self.preview is not None or self.applied_coupon is not None:
            logger.debug("[Checkout] Cart changed, promotion preview and coupon dropped")
        self.preview = None
        self.applied_coupon = None

    def _on_local_cart_changed(self) -> None:
        if self._cart is None:
            self._invalidate()

    def use_cart(self, cart: CartDTO | None) -> None:
        """Pin the cart being checked out; None falls back to the Local Store cart."""
        if cart != self._cart:
            self._invalidate()
        self._cart = cart

    @property
    def is_pinned(self) -> bool:
        return self._cart is not None

    @property
    def cart(self) -> CartDTO:
        if self._cart is not None:
            return self._cart
        return self.local_cart.get()

    async def refresh_cart(self) -> CartDTO:
        """
        Re-read a pinned cart from the Remote Store.

        The Local Store cart is returned as is.

        Raises:
            RemoteStoreException: The server cart could not be read
        """
        if self._cart is not None and self.remote_cart is not None:
            self.use_cart(await self.remote_cart.get_cart())
        return self.cart

    async def load_preview(self) -> PromotionPreviewDTO | None:
        """
        Fetch the promotion preview.

        Any failure leaves the checkout without promotions; pricing then falls
        back to raw cart totals and configured shipping.
        """
        try:
            self.preview = await self.promotions.preview_cart()
        except CommerceException as e:
            logger.warning(f"[Checkout] Promotion preview unavailable ({e.kind.value}): {e}")
            self.preview = None
        return self.preview

    async def apply_coupon(self, code: str) -> CouponResultDTO:
        """
        Validate and apply a coupon, replacing any previously applied one.

        The cart is never modified.

        Raises:
            CouponInvalidException: Blank code, rejected by the server, or a 4xx response
            RemoteStoreException: Server or transport failure (5xx, timeout)
        """
        code = (code or "").strip()
        if not code:
            raise CouponInvalidException(code, self.BLANK_CODE_MESSAGE)

        # At most one coupon: the previous one is gone even if this one fails
        self.applied_coupon = None

        try:
            result = await self.coupons.validate_coupon(code, self.cart.total)
        except RemoteStoreException as e:
            if e.status is not None and 400 <= e.status < 500:
                raise CouponInvalidException(code, e.server_message) from e
            raise

        if not result.valid:
            logger.info(f"[Checkout] Coupon '{code}' rejected: {result.message}")
            raise CouponInvalidException(code, result.message)

        self.applied_coupon = result.model_copy(update={"code": result.code or code})
        logger.info(f"[Checkout] Coupon '{code}' applied: -{result.discount_amount}")
        return self.applied_coupon

    def remove_coupon(self) -> None:
        self.applied_coupon = None

    def summary(self) -> PricingResultDTO:
        coupon_discount = self.applied_coupon.discount_amount if self.applied_coupon else 0.0
        return PricingService.calculate(
            self.cart,
            self.preview,
            coupon_discount,
            PricingService.resolve_shipping_config(self.preview),
        )

    async def place_order(self, shipping_address_id: int, payment_method_id: int,
                          notes: str | None = None) -> OrderDTO:
        """
        Create the order and reset the checkout.

        On success the local cart is cleared unconditionally (the server
        clears its own cart when creating the order).

        Raises:
            EmptyCartException: Nothing to order
            RemoteStoreException: Server cart unreadable or order creation failed; cart and coupon are kept
        """
        cart = self.cart
        if self._cart is not None and self.remote_cart is not None:
            # The server orders its own cart; the pinned copy may be stale
            cart = self._cart = await self.remote_cart.get_cart()
        if not cart.items:
            raise EmptyCartException()

        request = CreateOrderRequestDTO(
            shipping_address_id=shipping_address_id,
            payment_method_id=payment_method_id,
            coupon_code=self.applied_coupon.code if self.applied_coupon else None,
            notes=notes,
        )
        order = await self.orders.create_order(request)

        self.local_cart.clear()
        self._cart = None if self._cart is None else CartDTO.from_items([])
        self.applied_coupon = None
        self.preview = None
        return order
