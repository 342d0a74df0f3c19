from pydantic import BaseModel, Field

from enums.collection_kind import CollectionKind
from enums.failure_kind import FailureKind
from models.base import CamelDTO


class CartMergeItemDTO(CamelDTO):
    product_id: int
    quantity: int


class CartMergeRequestDTO(CamelDTO):
    """Body of ``POST /cart/sync``: ``{"items": [{"productId", "quantity"}]}``."""
    items: list[CartMergeItemDTO] = Field(default_factory=list)


class WishlistMergeItemDTO(CamelDTO):
    product_id: int


class WishlistMergeRequestDTO(CamelDTO):
    """Body of ``POST /wishlist/sync``: ``{"productIds": [{"productId"}]}``."""
    product_ids: list[WishlistMergeItemDTO] = Field(default_factory=list)


class SyncResultDTO(BaseModel):
    collection: CollectionKind
    synced: bool = False
    item_count: int = 0  # Local items offered for the merge
    failure_kind: FailureKind | None = None
    error: str | None = None


class SyncReportDTO(BaseModel):
    cart: SyncResultDTO
    wishlist: SyncResultDTO

    @property
    def any_synced(self) -> bool:
        return self.cart.synced or self.wishlist.synced
