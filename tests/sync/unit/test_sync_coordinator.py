"""
Unit Tests: SyncCoordinator

Tests for services/sync.py covering:
- Empty local collection: no remote call, returns False
- Successful merge: request shape, local collection cleared, returns True
- Failed merge: local record unchanged, returns False, never raises
- sync_after_login() report and helper reads
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from enums.collection_kind import CollectionKind
from enums.failure_kind import FailureKind
from exceptions.remote import RemoteStoreException
from exceptions.storage import StorageUnavailableException
from models.sync import CartMergeRequestDTO, WishlistMergeRequestDTO
from services.sync import SyncCoordinator


@pytest.fixture
def remote_cart():
    client = MagicMock()
    client.merge_from_local = AsyncMock(return_value=None)
    return client


@pytest.fixture
def remote_wishlist():
    client = MagicMock()
    client.merge_from_local = AsyncMock(return_value=None)
    return client


@pytest.fixture
def coordinator(cart_store, wishlist_store, remote_cart, remote_wishlist):
    return SyncCoordinator(cart_store, wishlist_store, remote_cart, remote_wishlist)


class TestSyncCart:

    @pytest.mark.asyncio
    async def test_empty_cart_makes_no_request(self, coordinator, remote_cart):
        assert await coordinator.sync_cart() is False
        remote_cart.merge_from_local.assert_not_called()

    @pytest.mark.asyncio
    async def test_merge_request_shape(self, coordinator, cart_store, remote_cart, make_product):
        cart_store.add_item(make_product(1, stock=10), quantity=2)
        cart_store.add_item(make_product(5, stock=10), quantity=1)

        await coordinator.sync_cart()

        request = remote_cart.merge_from_local.call_args.args[0]
        assert isinstance(request, CartMergeRequestDTO)
        assert request.to_payload() == {"items": [
            {"productId": 1, "quantity": 2},
            {"productId": 5, "quantity": 1},
        ]}

    @pytest.mark.asyncio
    async def test_success_clears_local_cart(self, coordinator, cart_store, make_product):
        cart_store.add_item(make_product(1), quantity=2)

        assert await coordinator.sync_cart() is True
        assert cart_store.is_empty()

    @pytest.mark.asyncio
    async def test_failure_leaves_record_byte_for_byte(self, coordinator, cart_store, sql_storage,
                                                      remote_cart, make_product):
        cart_store.add_item(make_product(1), quantity=2)
        cart_store.add_item(make_product(2), quantity=1)
        before = sql_storage.get_item("greeting_card_cart")
        remote_cart.merge_from_local.side_effect = RemoteStoreException("POST", "/cart/sync", 500, "boom")

        result = await coordinator.sync_cart()

        assert result is False
        assert sql_storage.get_item("greeting_card_cart") == before

    @pytest.mark.asyncio
    async def test_failed_delete_falls_back_to_empty_record(self, coordinator, cart_store, sql_storage,
                                                            make_product):
        cart_store.add_item(make_product(1), quantity=2)

        with patch.object(sql_storage, "remove_item",
                          side_effect=StorageUnavailableException("greeting_card_cart", "delete", "locked")):
            assert await coordinator.sync_cart() is True

        assert cart_store.is_empty()

    @pytest.mark.asyncio
    async def test_uncleared_record_is_not_reported_as_synced(self, coordinator, cart_store, sql_storage,
                                                              remote_cart, make_product):
        cart_store.add_item(make_product(1), quantity=2)
        locked = StorageUnavailableException("greeting_card_cart", "write", "locked")

        with patch.object(sql_storage, "remove_item", side_effect=locked), \
                patch.object(sql_storage, "set_item", side_effect=locked):
            result = (await coordinator.sync_after_login()).cart

        remote_cart.merge_from_local.assert_awaited_once()
        assert result.synced is False
        assert result.failure_kind == FailureKind.STORAGE_UNAVAILABLE
        assert result.item_count == 1

    @pytest.mark.asyncio
    async def test_any_exception_is_absorbed(self, coordinator, cart_store, remote_cart, make_product):
        cart_store.add_item(make_product(1))
        remote_cart.merge_from_local.side_effect = RuntimeError("unexpected")

        assert await coordinator.sync_cart() is False
        assert cart_store.has_item(1)


class TestSyncWishlist:

    @pytest.mark.asyncio
    async def test_merge_request_shape(self, coordinator, wishlist_store, remote_wishlist, make_product):
        wishlist_store.add_item(make_product(3))
        wishlist_store.add_item(make_product(4))

        assert await coordinator.sync_wishlist() is True

        request = remote_wishlist.merge_from_local.call_args.args[0]
        assert isinstance(request, WishlistMergeRequestDTO)
        assert request.to_payload() == {"productIds": [{"productId": 3}, {"productId": 4}]}
        assert wishlist_store.is_empty()

    @pytest.mark.asyncio
    async def test_failure_keeps_wishlist(self, coordinator, wishlist_store, remote_wishlist, make_product):
        wishlist_store.add_item(make_product(3))
        remote_wishlist.merge_from_local.side_effect = RemoteStoreException("POST", "/wishlist/sync")

        assert await coordinator.sync_wishlist() is False
        assert wishlist_store.has_item(3)


class TestSyncAfterLogin:

    @pytest.mark.asyncio
    async def test_report(self, coordinator, cart_store, wishlist_store, remote_wishlist, make_product):
        cart_store.add_item(make_product(1), quantity=3)
        wishlist_store.add_item(make_product(2))
        remote_wishlist.merge_from_local.side_effect = RemoteStoreException("POST", "/wishlist/sync", 503)

        report = await coordinator.sync_after_login()

        assert report.cart.collection == CollectionKind.CART
        assert report.cart.synced is True
        assert report.cart.item_count == 1
        assert report.wishlist.synced is False
        assert report.wishlist.failure_kind == FailureKind.REMOTE_SYNC_FAILURE
        assert report.wishlist.item_count == 1
        assert report.any_synced is True

    @pytest.mark.asyncio
    async def test_failure_in_cart_does_not_skip_wishlist(self, coordinator, cart_store, wishlist_store,
                                                         remote_cart, remote_wishlist, make_product):
        cart_store.add_item(make_product(1))
        wishlist_store.add_item(make_product(2))
        remote_cart.merge_from_local.side_effect = RemoteStoreException("POST", "/cart/sync", 500)

        report = await coordinator.sync_after_login()

        assert report.cart.synced is False
        assert report.wishlist.synced is True
        remote_wishlist.merge_from_local.assert_awaited_once()

    def test_helper_reads(self, coordinator, cart_store, wishlist_store, make_product):
        assert coordinator.has_local_cart() is False
        assert coordinator.has_local_wishlist() is False

        cart_store.add_item(make_product(1), quantity=4)
        wishlist_store.add_item(make_product(2))

        assert coordinator.has_local_cart() is True
        assert coordinator.local_cart_item_count() == 4
        assert coordinator.has_local_wishlist() is True
        assert coordinator.local_wishlist_item_count() == 1
