# A cart lives in two places: the Local Store (guest, persisted on the client)
# and the Remote Store (authenticated, server-backed). Both are represented by
# CartDTO. Items carry a denormalized copy of the product so the local cart
# renders offline.
#
# total and total_items are derived values: build carts with CartDTO.from_items()
# so they are always recomputed from the items that justify them.
from typing import Iterable

from pydantic import Field

from models.base import CamelDTO
from models.product import ProductSnapshotDTO, RemoteProductDTO


class CartItemDTO(CamelDTO):
    product_id: int
    product_name: str = ""
    product_slug: str = ""
    product_image: str = ""
    price: float = 0.0  # Unit price at the time of adding
    quantity: int = 1
    stock: int = 0  # Availability snapshot at last known time

    @staticmethod
    def from_product(product: ProductSnapshotDTO, quantity: int) -> "CartItemDTO":
        return CartItemDTO(quantity=quantity, **product.model_dump())


class CartDTO(CamelDTO):
    items: list[CartItemDTO] = Field(default_factory=list)
    total: float = 0.0
    total_items: int = 0

    @staticmethod
    def from_items(items: Iterable[CartItemDTO]) -> "CartDTO":
        items = list(items)
        return CartDTO(
            items=items,
            total=sum(item.price * item.quantity for item in items),
            total_items=sum(item.quantity for item in items),
        )

    def get_item(self, product_id: int) -> CartItemDTO | None:
        return next((item for item in self.items if item.product_id == product_id), None)


class RemoteCartLineDTO(CamelDTO):
    id: int | None = None
    product: RemoteProductDTO
    quantity: int
    subtotal: float | None = None


class RemoteCartResponseDTO(CamelDTO):
    """Cart as returned by the Remote Store (``GET /cart`` and mutations)."""
    id: int | None = None
    items: list[RemoteCartLineDTO] = Field(default_factory=list)
    total: float = 0.0
    total_items: int = 0

    def to_cart(self) -> CartDTO:
        """
        Map the server cart onto the local cart shape.

        Aggregates are recomputed from the mapped items rather than trusting
        the server's totals, which keeps both representations consistent.
        """
        return CartDTO.from_items(
            CartItemDTO.from_product(line.product.to_snapshot(), line.quantity)
            for line in self.items
        )
