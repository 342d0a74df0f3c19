"""
Local Store Adapter

Guest carts and wishlists persisted as one JSON record per collection in a
client-side key/value storage. Every mutation recomputes aggregates from the
items, persists the new snapshot and publishes the collection's change signal.

Storage failures never reach the caller: reads degrade to an empty snapshot,
writes are logged and the computed snapshot is still returned.
"""

import json
import logging
from typing import Generic, TypeVar, Iterable

from pydantic import ValidationError

import config
from enums.change_signal import ChangeSignal
from enums.collection_kind import CollectionKind
from enums.failure_kind import FailureKind
from enums.stock_policy import StockPolicy
from exceptions.storage import StorageUnavailableException
from models.base import CamelDTO
from models.cart import CartDTO, CartItemDTO
from models.product import ProductSnapshotDTO
from models.wishlist import WishlistDTO, WishlistItemDTO
from repositories.local_storage import LocalStorage
from services.notification import ChangeNotifier
from services.stock_guard import StockGuard

logger = logging.getLogger(__name__)

SnapshotT = TypeVar("SnapshotT", CartDTO, WishlistDTO)


class LocalStore(Generic[SnapshotT]):
    """Behaviour shared by the cart and wishlist stores."""

    kind: CollectionKind
    snapshot_type: type[CamelDTO]

    def __init__(self, storage: LocalStorage, notifier: ChangeNotifier, storage_key: str):
        self.storage = storage
        self.notifier = notifier
        self.storage_key = storage_key

    @property
    def signal(self) -> ChangeSignal:
        return ChangeSignal.for_collection(self.kind)

    def _from_items(self, items: Iterable) -> SnapshotT:
        return self.snapshot_type.from_items(items)

    def get(self) -> SnapshotT:
        """Current snapshot; empty when nothing is stored or the record is unreadable."""
        try:
            raw = self.storage.get_item(self.storage_key)
        except StorageUnavailableException as e:
            logger.warning(f"[LocalStore] {FailureKind.STORAGE_UNAVAILABLE.value}: {e}")
            return self._from_items([])

        if not raw:
            return self._from_items([])

        try:
            stored = self.snapshot_type.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.warning(f"[LocalStore] Discarding corrupt {self.kind.value} record '{self.storage_key}': {e}")
            return self._from_items([])

        # Aggregates are derived, never trusted from storage
        return self._from_items(stored.items)

    def save(self, snapshot: SnapshotT) -> SnapshotT:
        try:
            self.storage.set_item(self.storage_key, json.dumps(snapshot.to_payload()))
        except StorageUnavailableException as e:
            logger.warning(f"[LocalStore] {FailureKind.STORAGE_UNAVAILABLE.value}: {e}")
        return snapshot

    def _commit(self, items: Iterable) -> SnapshotT:
        snapshot = self.save(self._from_items(items))
        self.notifier.publish(self.signal)
        return snapshot

    def remove_item(self, product_id: int) -> SnapshotT:
        snapshot = self.get()
        return self._commit(item for item in snapshot.items if item.product_id != product_id)

    def clear(self) -> bool:
        """
        Drop the stored record; an empty record is written when the delete fails.

        Returns:
            False when neither the delete nor the empty write reached storage
        """
        cleared = True
        try:
            self.storage.remove_item(self.storage_key)
        except StorageUnavailableException as e:
            logger.warning(f"[LocalStore] {FailureKind.STORAGE_UNAVAILABLE.value}: {e}")
            try:
                self.storage.set_item(self.storage_key, json.dumps(self._from_items([]).to_payload()))
            except StorageUnavailableException as e:
                logger.error(f"[LocalStore] Could not clear {self.kind.value} record '{self.storage_key}': {e}")
                cleared = False
        self.notifier.publish(self.signal)
        return cleared

    def is_empty(self) -> bool:
        return len(self.get().items) == 0

    def item_count(self) -> int:
        return self.get().total_items

    def has_item(self, product_id: int) -> bool:
        return self.get().get_item(product_id) is not None


class LocalCartStore(LocalStore[CartDTO]):
    kind = CollectionKind.CART
    snapshot_type = CartDTO

    def __init__(self, storage: LocalStorage, notifier: ChangeNotifier, storage_key: str | None = None):
        super().__init__(storage, notifier, storage_key or config.CART_STORAGE_KEY)

    def add_item(self, product: ProductSnapshotDTO, quantity: int = 1,
                 policy: StockPolicy = StockPolicy.CLAMP) -> CartDTO:
        """
        Add ``quantity`` units of a product.

        An existing line is increased; the resulting quantity is checked
        against the product's stock snapshot passed in (the freshest one).

        Raises:
            StockExceededException: Only with StockPolicy.REJECT
        """
        snapshot = self.get()
        existing = snapshot.get_item(product.product_id)
        requested = (existing.quantity if existing else 0) + quantity

        resolved = StockGuard.resolve(product.product_id, requested, product.stock, policy)
        if resolved is None:
            if existing is None:
                return snapshot
            return self.remove_item(product.product_id)

        if existing is None:
            items = snapshot.items + [CartItemDTO.from_product(product, resolved)]
        else:
            items = [
                item.model_copy(update={"quantity": resolved, "stock": product.stock})
                if item.product_id == product.product_id else item
                for item in snapshot.items
            ]
        logger.debug(f"[LocalCart] Product {product.product_id} quantity -> {resolved}")
        return self._commit(items)

    def update_item_quantity(self, product_id: int, quantity: int,
                             policy: StockPolicy = StockPolicy.CLAMP) -> CartDTO:
        """
        Set the quantity of an existing line.

        quantity <= 0 removes the line. Unknown products leave the cart
        untouched and publish nothing.
        """
        if quantity <= 0:
            return self.remove_item(product_id)

        snapshot = self.get()
        existing = snapshot.get_item(product_id)
        if existing is None:
            return snapshot

        resolved = StockGuard.resolve(product_id, quantity, existing.stock, policy)
        if resolved is None:
            return self.remove_item(product_id)

        return self._commit(
            item.model_copy(update={"quantity": resolved}) if item.product_id == product_id else item
            for item in snapshot.items
        )

    def get_item_quantity(self, product_id: int) -> int:
        item = self.get().get_item(product_id)
        return item.quantity if item else 0


class LocalWishlistStore(LocalStore[WishlistDTO]):
    kind = CollectionKind.WISHLIST
    snapshot_type = WishlistDTO

    def __init__(self, storage: LocalStorage, notifier: ChangeNotifier, storage_key: str | None = None):
        super().__init__(storage, notifier, storage_key or config.WISHLIST_STORAGE_KEY)

    def add_item(self, product: ProductSnapshotDTO) -> WishlistDTO:
        """No-op when the product is already present; its added_at is preserved."""
        snapshot = self.get()
        if snapshot.get_item(product.product_id) is not None:
            return snapshot
        return self._commit(snapshot.items + [WishlistItemDTO.from_product(product)])

    def toggle_item(self, product: ProductSnapshotDTO) -> WishlistDTO:
        if self.has_item(product.product_id):
            return self.remove_item(product.product_id)
        return self.add_item(product)

    def mark_in_wishlist(self, product_ids: Iterable[int]) -> dict[int, bool]:
        """Wishlist membership of each product for guest listings, read in one storage access."""
        snapshot = self.get()
        return {product_id: snapshot.get_item(product_id) is not None for product_id in product_ids}
