"""
Remote Store collaborators.

Typed wrappers over ApiClient for the storefront endpoints the engine uses.
Every method raises RemoteStoreException on failure; none of them retries.
"""

import logging

from models.cart import CartDTO, RemoteCartResponseDTO
from models.coupon import CouponResultDTO, ValidateCouponRequestDTO
from models.order import CreateOrderRequestDTO, OrderDTO
from models.promotion import PromotionPreviewDTO
from models.sync import CartMergeRequestDTO, WishlistMergeRequestDTO
from models.wishlist import WishlistDTO, RemoteWishlistResponseDTO
from services.api_client import ApiClient

logger = logging.getLogger(__name__)


def _cart(data) -> CartDTO:
    if not data:
        return CartDTO.from_items([])
    return RemoteCartResponseDTO.model_validate(data).to_cart()


def _wishlist(data) -> WishlistDTO:
    if not data:
        return WishlistDTO.from_items([])
    return RemoteWishlistResponseDTO.model_validate(data).to_wishlist()


class RemoteCartClient:

    def __init__(self, api: ApiClient):
        self.api = api

    async def get_cart(self) -> CartDTO:
        return _cart(await self.api.get("/cart"))

    async def add_item(self, product_id: int, quantity: int) -> CartDTO:
        return _cart(await self.api.post("/cart/add", {"productId": product_id, "quantity": quantity}))

    async def update_item(self, product_id: int, quantity: int) -> CartDTO:
        return _cart(await self.api.put(f"/cart/items/{product_id}", {"quantity": quantity}))

    async def remove_item(self, product_id: int) -> None:
        await self.api.delete(f"/cart/items/{product_id}")

    async def clear(self) -> None:
        await self.api.delete("/cart")

    async def merge_from_local(self, request: CartMergeRequestDTO) -> None:
        """
        Merge guest cart lines into the server cart (``POST /cart/sync``).

        A 2xx status means the merge happened; the response body is not read.
        """
        await self.api.post("/cart/sync", request.to_payload())


class RemoteWishlistClient:

    def __init__(self, api: ApiClient):
        self.api = api

    async def get_wishlist(self) -> WishlistDTO:
        return _wishlist(await self.api.get("/wishlist"))

    async def add_item(self, product_id: int) -> WishlistDTO:
        return _wishlist(await self.api.post("/wishlist/add", {"productId": product_id}))

    async def remove_item(self, product_id: int) -> None:
        await self.api.delete(f"/wishlist/items/{product_id}")

    async def clear(self) -> None:
        await self.api.delete("/wishlist")

    async def contains(self, product_id: int) -> bool:
        return bool(await self.api.get(f"/wishlist/check/{product_id}"))

    async def merge_from_local(self, request: WishlistMergeRequestDTO) -> None:
        """Merge guest wishlist products into the server wishlist (``POST /wishlist/sync``)."""
        await self.api.post("/wishlist/sync", request.to_payload())


class CouponClient:

    def __init__(self, api: ApiClient):
        self.api = api

    async def validate_coupon(self, code: str, order_total: float) -> CouponResultDTO:
        request = ValidateCouponRequestDTO(code=code, order_total=order_total)
        data = await self.api.post("/coupons/validate", request.to_payload())
        return CouponResultDTO.model_validate(data or {})


class PromotionClient:

    def __init__(self, api: ApiClient):
        self.api = api

    async def preview_cart(self) -> PromotionPreviewDTO:
        """
        Promotion preview for the caller's server cart.

        Raises:
            RemoteStoreException: Request failed
            PricingComputationException: Response body is not a preview object
        """
        return PromotionPreviewDTO.from_payload(await self.api.get("/promotions/cart-preview"))


class OrderClient:

    def __init__(self, api: ApiClient):
        self.api = api

    async def create_order(self, request: CreateOrderRequestDTO) -> OrderDTO:
        data = await self.api.post("/orders", request.to_payload())
        order = OrderDTO.model_validate(data)
        logger.info(f"[OrderClient] Created order {order.order_number or order.id}")
        return order
