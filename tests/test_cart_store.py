"""
Tests for the cart store operations
"""

import json

import pytest
from pydantic import ValidationError

from cart_store.core.cart import CartStore, find_item_index
from cart_store.exceptions import InvalidCombinationError, InvalidQuantityError
from cart_store.models.cart import CartItem
from cart_store.storage.backends import MemoryBackend


def as_dicts(items):
    return [item.to_storage() for item in items]


class TestInitialization:
    """Tests for lazy creation of the cart slot."""

    def test_fresh_backend_returns_empty_cart(self, store, backend):
        """Reading an uninitialized backend creates the slot."""
        assert store.get_items() == []
        assert backend.get("cart") == "[]"

    def test_initialize_storage_is_idempotent(self, store, backend):
        """An existing slot is left alone."""
        backend.set("cart", '[{"productId":"a","colorId":null,"qty":1}]')
        store.initialize_storage()
        assert backend.get("cart") == '[{"productId":"a","colorId":null,"qty":1}]'

    def test_custom_storage_key(self, backend):
        """The slot name is configurable."""
        store = CartStore(backend, storage_key="basket")
        store.add_item("shirt", "red", 1)
        assert "basket" in backend
        assert "cart" not in backend


class TestAddItem:
    """Tests for adding items."""

    def test_add_same_combination_accumulates(self, store):
        """Adding the same pair twice sums the quantities."""
        store.add_item("shirt", "red", 2)
        store.add_item("shirt", "red", 3)

        assert as_dicts(store.get_items()) == [
            {"productId": "shirt", "colorId": "red", "qty": 5}
        ]
        assert store.total_items() == 5

    def test_distinct_combinations_get_own_lines(self, store):
        """One line per (product, color) pair, in insertion order."""
        store.add_item("shirt", "red", 1)
        store.add_item("shirt", "blue", 2)
        store.add_item("hat", None, 4)
        store.add_item("shirt", "blue", 1)

        assert as_dicts(store.get_items()) == [
            {"productId": "shirt", "colorId": "red", "qty": 1},
            {"productId": "shirt", "colorId": "blue", "qty": 3},
            {"productId": "hat", "colorId": None, "qty": 4},
        ]

    def test_none_color_is_not_empty_string(self, store):
        """A missing color never matches an empty color id."""
        store.add_item("hat", None, 1)
        store.add_item("hat", "", 1)

        items = store.get_items()
        assert len(items) == 2
        assert items[0].color_id is None
        assert items[1].color_id == ""

    def test_negative_quantity_accepted_by_default(self, store):
        """Without validation, quantities are taken literally."""
        store.add_item("shirt", "red", 2)
        store.add_item("shirt", "red", -5)
        assert store.get_items()[0].qty == -3

    def test_float_quantity_kept(self, store):
        store.add_item("fabric", None, 1.5)
        assert store.get_items()[0].qty == 1.5

    def test_quantity_stored_as_given_by_default(self, store, backend):
        """Without validation, a non-numeric quantity is written unchanged."""
        store.add_item("shirt", "red", "2")
        assert backend.get("cart") == (
            '[{"productId":"shirt","colorId":"red","qty":"2"}]'
        )

    def test_validation_rejects_negative(self, backend):
        """With validation enabled, bad quantities raise and nothing is written."""
        store = CartStore(backend, validate_qty=True)
        with pytest.raises(InvalidQuantityError):
            store.add_item("shirt", "red", -1)
        with pytest.raises(InvalidQuantityError):
            store.add_item("shirt", "red", "2")
        assert backend.get("cart") is None


class TestRemoveItem:
    """Tests for removing items."""

    def test_remove_keeps_other_lines_in_order(self, store):
        store.add_item("shirt", "red", 2)
        store.add_item("shirt", "blue", 1)
        store.add_item("hat", None, 3)
        store.remove_item("shirt", "red")

        assert as_dicts(store.get_items()) == [
            {"productId": "shirt", "colorId": "blue", "qty": 1},
            {"productId": "hat", "colorId": None, "qty": 3},
        ]

    def test_remove_scenario(self, store):
        store.add_item("shirt", "red", 2)
        store.add_item("shirt", "blue", 1)
        store.remove_item("shirt", "red")

        assert as_dicts(store.get_items()) == [
            {"productId": "shirt", "colorId": "blue", "qty": 1}
        ]

    def test_remove_missing_is_noop(self, store):
        store.add_item("shirt", "red", 2)
        store.remove_item("shirt", "green")
        assert store.total_items() == 2

    def test_remove_drops_all_duplicates(self, backend):
        """Duplicates written by someone else are all removed."""
        backend.set(
            "cart",
            json.dumps(
                [
                    {"productId": "a", "colorId": None, "qty": 1},
                    {"productId": "b", "colorId": None, "qty": 1},
                    {"productId": "a", "colorId": None, "qty": 2},
                ]
            ),
        )
        store = CartStore(backend)
        store.remove_item("a", None)
        assert as_dicts(store.get_items()) == [
            {"productId": "b", "colorId": None, "qty": 1}
        ]


class TestUpdateQty:
    """Tests for setting quantities."""

    def test_update_sets_exact_quantity(self, store):
        store.add_item("shirt", "red", 2)
        item = store.update_qty("shirt", "red", 7)

        assert item.qty == 7
        assert store.get_items()[0].qty == 7
        assert store.total_items() == 7

    def test_update_missing_raises_and_leaves_storage(self, store, backend):
        store.add_item("shirt", "red", 2)
        before = backend.get("cart")

        with pytest.raises(InvalidCombinationError) as exc_info:
            store.update_qty("shirt", "blue", 4)

        assert exc_info.value.product_id == "shirt"
        assert exc_info.value.color_id == "blue"
        assert "shirt, blue" in str(exc_info.value)
        assert backend.get("cart") == before

    def test_update_accepts_any_quantity_by_default(self, store):
        """Only a missing combination is an error when validation is off."""
        store.add_item("shirt", "red", 1)
        store.update_qty("shirt", "red", "x")
        assert store.get_items()[0].qty == "x"

    def test_update_validation_rejects_non_number(self, backend):
        store = CartStore(backend, validate_qty=True)
        store.add_item("shirt", "red", 1)
        with pytest.raises(InvalidQuantityError):
            store.update_qty("shirt", "red", "x")
        assert store.get_items()[0].qty == 1

    def test_missing_color_message_shows_null(self, store):
        with pytest.raises(InvalidCombinationError, match="hat, null$"):
            store.update_qty("hat", None, 1)

    def test_update_none_color_does_not_match_string(self, store):
        store.add_item("hat", None, 1)
        with pytest.raises(InvalidCombinationError):
            store.update_qty("hat", "None", 3)

    def test_update_first_duplicate_only(self, backend):
        backend.set(
            "cart",
            '[{"productId":"a","colorId":"x","qty":1},'
            '{"productId":"a","colorId":"x","qty":2}]',
        )
        store = CartStore(backend)
        store.update_qty("a", "x", 9)
        assert [item.qty for item in store.get_items()] == [9, 2]

    def test_try_update_reports_missing(self, store):
        result = store.try_update_qty("shirt", "red", 1)

        assert not result.ok
        assert result.item is None
        assert isinstance(result.error, InvalidCombinationError)

    def test_try_update_success(self, store):
        store.add_item("shirt", "red", 1)
        result = store.try_update_qty("shirt", "red", 3)

        assert result.ok
        assert result.error is None
        assert result.item.qty == 3


class TestClearAndTotal:
    """Tests for clearing and totals."""

    def test_clear_empties_cart(self, store, backend):
        store.add_item("shirt", "red", 2)
        store.add_item("hat", None, 1)
        store.clear()

        assert store.get_items() == []
        assert store.total_items() == 0
        assert backend.get("cart") == "[]"

    def test_total_matches_items(self, store):
        store.add_item("a", None, 1)
        store.add_item("b", "x", 2.5)
        store.add_item("c", "y", 3)

        assert store.total_items() == sum(item.qty for item in store.get_items())
        assert store.total_items() == 6.5

    def test_empty_total_is_zero(self, store):
        assert store.total_items() == 0


class TestStorageFormat:
    """Tests for the serialized cart."""

    def test_serialized_format(self, store, backend):
        store.add_item("shirt", "red", 2)
        store.add_item("hat", None, 1)

        assert backend.get("cart") == (
            '[{"productId":"shirt","colorId":"red","qty":2},'
            '{"productId":"hat","colorId":null,"qty":1}]'
        )

    def test_non_ascii_ids_written_unescaped(self, store, backend):
        store.add_item("café", "été", 2)
        assert backend.get("cart") == (
            '[{"productId":"café","colorId":"été","qty":2}]'
        )

    def test_no_in_memory_cache(self, backend):
        """Two stores on one backend see each other's writes."""
        first = CartStore(backend)
        second = CartStore(backend)
        first.add_item("shirt", "red", 2)
        second.add_item("shirt", "red", 1)

        assert first.total_items() == 3

    def test_corrupted_json_propagates(self, backend):
        backend.set("cart", "{not json")
        with pytest.raises(json.JSONDecodeError):
            CartStore(backend).get_items()

    def test_malformed_entry_propagates(self, backend):
        backend.set("cart", '[{"productId":"a"}]')
        with pytest.raises(ValidationError):
            CartStore(backend).get_items()

    def test_save_storage_round_trips_items(self, store):
        items = [CartItem(product_id="a", color_id=None, qty=1)]
        store.save_storage(items)
        assert store.get_storage() == items


class TestFindItemIndex:
    """Tests for the linear lookup."""

    def test_first_match_wins(self):
        items = [
            CartItem(product_id="a", color_id="x", qty=1),
            CartItem(product_id="a", color_id="x", qty=2),
        ]
        assert find_item_index(items, "a", "x") == 0

    def test_missing_returns_minus_one(self):
        items = [CartItem(product_id="a", color_id="x", qty=1)]
        assert find_item_index(items, "a", None) == -1
        assert find_item_index([], "a", "x") == -1


class TestEventLogging:
    """Tests for the optional event logger hooks."""

    def test_events_recorded(self, tmp_path):
        from cart_store.utils.structured_logger import create_structured_logger

        base, events = create_structured_logger(tmp_path, enable_json=True)
        store = CartStore(MemoryBackend(), event_logger=events)
        with base:
            store.add_item("shirt", "red", 2)
            store.update_qty("shirt", "red", 5)
            with pytest.raises(InvalidCombinationError):
                store.update_qty("hat", None, 1)
            store.remove_item("shirt", "red")
            store.clear()

        lines = base.json_log_path.read_text(encoding="utf-8").splitlines()
        names = [json.loads(line)["event"] for line in lines]
        assert names == [
            "item_added",
            "qty_updated",
            "update_rejected",
            "item_removed",
            "cart_cleared",
        ]
