"""
Unit Tests: LocalCartStore

Tests for services/local_store.py covering:
- add_item() - append, merge into existing line, stock clamping
- update_item_quantity() - clamp, remove on <= 0, unknown product
- remove_item() / clear()
- Aggregates always recomputed from items
- Corrupt or unavailable storage degrades to an empty cart

Run with:
    pytest tests/cart/unit/test_local_cart_store.py -v
"""

import json
from unittest.mock import MagicMock

import pytest

from enums.change_signal import ChangeSignal
from enums.stock_policy import StockPolicy
from exceptions.cart import StockExceededException
from exceptions.storage import StorageUnavailableException
from services.local_store import LocalCartStore


def assert_aggregates_consistent(cart):
    assert cart.total == sum(item.price * item.quantity for item in cart.items)
    assert cart.total_items == sum(item.quantity for item in cart.items)


class TestAddItem:

    def test_empty_cart_by_default(self, cart_store):
        cart = cart_store.get()

        assert cart.items == []
        assert cart.total == 0
        assert cart.total_items == 0
        assert cart_store.is_empty()

    def test_add_new_item(self, cart_store, make_product):
        cart = cart_store.add_item(make_product(1, price=50000, stock=10), quantity=2)

        assert len(cart.items) == 1
        assert cart.items[0].product_id == 1
        assert cart.items[0].quantity == 2
        assert cart.total == 100000
        assert cart.total_items == 2

    def test_add_persists(self, cart_store, make_product):
        cart_store.add_item(make_product(1), quantity=3)

        assert cart_store.get_item_quantity(1) == 3
        assert cart_store.has_item(1)

    def test_add_existing_item_increases_quantity(self, cart_store, make_product):
        product = make_product(1, stock=10)
        cart_store.add_item(product, quantity=2)
        cart = cart_store.add_item(product, quantity=3)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5

    def test_add_clamps_to_stock(self, cart_store, make_product):
        cart = cart_store.add_item(make_product(1, stock=5), quantity=10)

        assert cart.items[0].quantity == 5
        assert cart_store.get_item_quantity(1) == 5

    def test_add_existing_clamps_combined_quantity(self, cart_store, make_product):
        product = make_product(1, stock=5)
        cart_store.add_item(product, quantity=4)
        cart = cart_store.add_item(product, quantity=4)

        assert cart.items[0].quantity == 5

    def test_add_refreshes_stock_snapshot(self, cart_store, make_product):
        cart_store.add_item(make_product(1, stock=10), quantity=2)
        cart = cart_store.add_item(make_product(1, stock=3), quantity=5)

        assert cart.items[0].quantity == 3
        assert cart.items[0].stock == 3

    def test_add_out_of_stock_product_is_not_stored(self, cart_store, make_product):
        cart = cart_store.add_item(make_product(1, stock=0), quantity=1)

        assert cart.items == []
        assert cart_store.is_empty()

    def test_add_with_reject_policy_raises(self, cart_store, make_product):
        with pytest.raises(StockExceededException) as exc_info:
            cart_store.add_item(make_product(7, stock=5), quantity=10, policy=StockPolicy.REJECT)

        assert exc_info.value.available == 5
        assert exc_info.value.requested == 10
        assert cart_store.is_empty()

    def test_add_publishes_cart_changed(self, cart_store, notifier, make_product):
        callback = MagicMock()
        notifier.subscribe(ChangeSignal.CART_CHANGED, callback)

        cart_store.add_item(make_product(1))

        callback.assert_called_once_with()


class TestUpdateItemQuantity:

    def test_update_sets_quantity(self, cart_store, make_product):
        cart_store.add_item(make_product(1, stock=10), quantity=1)
        cart = cart_store.update_item_quantity(1, 4)

        assert cart.items[0].quantity == 4
        assert cart.total_items == 4

    def test_update_clamps_to_stored_stock(self, cart_store, make_product):
        cart_store.add_item(make_product(1, stock=6), quantity=1)
        cart = cart_store.update_item_quantity(1, 50)

        assert cart.items[0].quantity == 6

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_update_non_positive_removes(self, cart_store, make_product, quantity):
        cart_store.add_item(make_product(1), quantity=2)
        cart = cart_store.update_item_quantity(1, quantity)

        assert cart.items == []
        assert not cart_store.has_item(1)

    def test_update_unknown_product_is_noop(self, cart_store, notifier, make_product):
        cart_store.add_item(make_product(1), quantity=2)
        callback = MagicMock()
        notifier.subscribe(ChangeSignal.CART_CHANGED, callback)

        cart = cart_store.update_item_quantity(99, 3)

        assert [item.product_id for item in cart.items] == [1]
        callback.assert_not_called()


class TestRemoveAndClear:

    def test_remove_item(self, cart_store, make_product):
        cart_store.add_item(make_product(1, price=10000), quantity=1)
        cart_store.add_item(make_product(2, price=20000), quantity=2)

        cart = cart_store.remove_item(1)

        assert [item.product_id for item in cart.items] == [2]
        assert cart.total == 40000

    def test_clear(self, cart_store, make_product):
        cart_store.add_item(make_product(1))
        cart_store.clear()

        assert cart_store.is_empty()
        assert cart_store.item_count() == 0

    def test_clear_is_idempotent(self, cart_store, notifier):
        callback = MagicMock()
        notifier.subscribe(ChangeSignal.CART_CHANGED, callback)

        cart_store.clear()
        cart_store.clear()

        assert cart_store.is_empty()
        assert callback.call_count == 2


class TestAggregates:

    def test_aggregates_after_mixed_sequence(self, cart_store, make_product):
        cart_store.add_item(make_product(1, price=12500, stock=20), quantity=3)
        cart_store.add_item(make_product(2, price=99000, stock=2), quantity=5)
        cart_store.add_item(make_product(3, price=1000, stock=100), quantity=1)
        cart_store.update_item_quantity(1, 7)
        cart_store.remove_item(3)
        cart_store.add_item(make_product(1, price=12500, stock=20), quantity=1)

        cart = cart_store.get()

        assert_aggregates_consistent(cart)
        assert cart.total_items == 10
        assert cart.total == 8 * 12500 + 2 * 99000

    def test_stored_aggregates_are_not_trusted(self, sql_storage, notifier):
        sql_storage.set_item("greeting_card_cart", json.dumps({
            "items": [{"productId": 1, "price": 1000, "quantity": 2, "stock": 5}],
            "total": 999999,
            "totalItems": 42,
        }))

        cart = LocalCartStore(sql_storage, notifier).get()

        assert cart.total == 2000
        assert cart.total_items == 2

    def test_persisted_record_uses_camel_case(self, sql_storage, cart_store, make_product):
        cart_store.add_item(make_product(1, price=1000), quantity=2)

        record = json.loads(sql_storage.get_item("greeting_card_cart"))

        assert record["totalItems"] == 2
        assert record["items"][0]["productId"] == 1


class TestStorageFailures:

    @pytest.mark.parametrize("raw", ["{not json", "[]", json.dumps({"items": [{"price": 1}]})])
    def test_corrupt_record_reads_as_empty(self, sql_storage, notifier, raw):
        sql_storage.set_item("greeting_card_cart", raw)

        cart = LocalCartStore(sql_storage, notifier).get()

        assert cart.items == []

    def test_read_failure_returns_empty_cart(self, notifier):
        storage = MagicMock()
        storage.get_item.side_effect = StorageUnavailableException("greeting_card_cart", "read", "disk gone")

        cart = LocalCartStore(storage, notifier).get()

        assert cart.items == []

    def test_write_failure_still_returns_snapshot(self, notifier, make_product):
        storage = MagicMock()
        storage.get_item.return_value = None
        storage.set_item.side_effect = StorageUnavailableException("greeting_card_cart", "write", "quota exceeded")
        callback = MagicMock()
        notifier.subscribe(ChangeSignal.CART_CHANGED, callback)

        cart = LocalCartStore(storage, notifier).add_item(make_product(1, price=5000), quantity=2)

        assert cart.total == 10000
        callback.assert_called_once()

    def test_failed_delete_writes_empty_record(self, notifier):
        storage = MagicMock()
        storage.remove_item.side_effect = StorageUnavailableException("greeting_card_cart", "delete", "locked")

        assert LocalCartStore(storage, notifier).clear() is True

        key, value = storage.set_item.call_args.args
        assert key == "greeting_card_cart"
        assert json.loads(value)["items"] == []

    def test_clear_failure_is_absorbed(self, notifier):
        storage = MagicMock()
        storage.remove_item.side_effect = StorageUnavailableException("greeting_card_cart", "delete", "locked")
        storage.set_item.side_effect = StorageUnavailableException("greeting_card_cart", "write", "locked")
        callback = MagicMock()
        notifier.subscribe(ChangeSignal.CART_CHANGED, callback)

        assert LocalCartStore(storage, notifier).clear() is False
        callback.assert_called_once()
