"""
Sync Coordinator

Merges the guest Local Store collections into the Remote Store once per
successful authentication. A collection is cleared locally only after the
server accepted the merge; on any failure the local record is left exactly
as it was, so the next login offers it again.
"""

import logging

from enums.collection_kind import CollectionKind
from enums.failure_kind import FailureKind
from exceptions.remote import RemoteSyncFailureException
from models.sync import (
    CartMergeItemDTO, CartMergeRequestDTO,
    WishlistMergeItemDTO, WishlistMergeRequestDTO,
    SyncResultDTO, SyncReportDTO,
)
from services.local_store import LocalCartStore, LocalWishlistStore
from services.remote_store import RemoteCartClient, RemoteWishlistClient

logger = logging.getLogger(__name__)


class SyncCoordinator:

    def __init__(self, local_cart: LocalCartStore, local_wishlist: LocalWishlistStore,
                 remote_cart: RemoteCartClient, remote_wishlist: RemoteWishlistClient):
        self.local_cart = local_cart
        self.local_wishlist = local_wishlist
        self.remote_cart = remote_cart
        self.remote_wishlist = remote_wishlist

    async def _merge_cart(self) -> int:
        snapshot = self.local_cart.get()
        if not snapshot.items:
            return 0
        request = CartMergeRequestDTO(items=[
            CartMergeItemDTO(product_id=item.product_id, quantity=item.quantity)
            for item in snapshot.items
        ])
        await self.remote_cart.merge_from_local(request)
        return len(snapshot.items)

    async def _merge_wishlist(self) -> int:
        snapshot = self.local_wishlist.get()
        if not snapshot.items:
            return 0
        request = WishlistMergeRequestDTO(product_ids=[
            WishlistMergeItemDTO(product_id=item.product_id) for item in snapshot.items
        ])
        await self.remote_wishlist.merge_from_local(request)
        return len(snapshot.items)

    async def _sync(self, kind: CollectionKind) -> SyncResultDTO:
        if kind == CollectionKind.CART:
            merge, store = self._merge_cart, self.local_cart
        else:
            merge, store = self._merge_wishlist, self.local_wishlist

        try:
            item_count = await merge()
        except Exception as e:
            # Absorbed: local data stays put and the caller only sees synced=False
            failure = RemoteSyncFailureException(kind, str(e))
            logger.error(f"[Sync] {failure.kind.value}: {failure}")
            return SyncResultDTO(
                collection=kind,
                synced=False,
                item_count=len(store.get().items),
                failure_kind=FailureKind.REMOTE_SYNC_FAILURE,
                error=str(e),
            )

        if item_count == 0:
            return SyncResultDTO(collection=kind, synced=False, item_count=0)

        if not store.clear():
            # The server holds the merged lines; a surviving local record would be merged twice
            logger.error(f"[Sync] {kind.value} merged remotely but the local record could not be cleared")
            return SyncResultDTO(
                collection=kind,
                synced=False,
                item_count=item_count,
                failure_kind=FailureKind.STORAGE_UNAVAILABLE,
                error="Merged into remote store but the local record could not be cleared",
            )

        logger.info(f"[Sync] Merged {item_count} local {kind.value.lower()} item(s) into remote store")
        return SyncResultDTO(collection=kind, synced=True, item_count=item_count)

    async def sync_cart(self) -> bool:
        """
        Merge the local cart into the Remote Store.

        Returns:
            True if local items were merged and cleared, False if there was
            nothing to merge or the merge failed. Never raises.
        """
        return (await self._sync(CollectionKind.CART)).synced

    async def sync_wishlist(self) -> bool:
        """Same contract as sync_cart() for the wishlist."""
        return (await self._sync(CollectionKind.WISHLIST)).synced

    async def sync_after_login(self) -> SyncReportDTO:
        cart = await self._sync(CollectionKind.CART)
        wishlist = await self._sync(CollectionKind.WISHLIST)
        return SyncReportDTO(cart=cart, wishlist=wishlist)

    def has_local_cart(self) -> bool:
        return not self.local_cart.is_empty()

    def local_cart_item_count(self) -> int:
        return self.local_cart.item_count()

    def has_local_wishlist(self) -> bool:
        return not self.local_wishlist.is_empty()

    def local_wishlist_item_count(self) -> int:
        return self.local_wishlist.item_count()
