from datetime import datetime, timezone
from typing import Iterable

from pydantic import Field

from models.base import CamelDTO
from models.product import ProductSnapshotDTO, RemoteProductDTO


class WishlistItemDTO(CamelDTO):
    product_id: int
    product_name: str = ""
    product_slug: str = ""
    product_image: str = ""
    price: float = 0.0
    stock: int = 0
    added_at: str | None = None  # ISO-8601, set once on insertion

    @staticmethod
    def from_product(product: ProductSnapshotDTO, added_at: str | None = None) -> "WishlistItemDTO":
        return WishlistItemDTO(
            added_at=added_at or datetime.now(timezone.utc).isoformat(),
            **product.model_dump(),
        )


class WishlistDTO(CamelDTO):
    items: list[WishlistItemDTO] = Field(default_factory=list)
    total_items: int = 0

    @staticmethod
    def from_items(items: Iterable[WishlistItemDTO]) -> "WishlistDTO":
        items = list(items)
        return WishlistDTO(items=items, total_items=len(items))

    def get_item(self, product_id: int) -> WishlistItemDTO | None:
        return next((item for item in self.items if item.product_id == product_id), None)


class RemoteWishlistLineDTO(CamelDTO):
    id: int | None = None
    product: RemoteProductDTO
    added_at: str | None = None


class RemoteWishlistResponseDTO(CamelDTO):
    """Wishlist as returned by the Remote Store."""
    id: int | None = None
    items: list[RemoteWishlistLineDTO] = Field(default_factory=list)
    total_items: int = 0

    def to_wishlist(self) -> WishlistDTO:
        return WishlistDTO.from_items(
            WishlistItemDTO.from_product(line.product.to_snapshot(), added_at=line.added_at)
            for line in self.items
        )
