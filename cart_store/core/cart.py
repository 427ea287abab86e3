"""
The cart store: a persisted list of cart items kept in a single backend slot.

Every public operation is an independent read-modify-write round trip against
the backend. Nothing is cached between calls, so two stores sharing a backend
always see each other's writes, but concurrent writers can overwrite each other.
"""

import json
import logging
from numbers import Real

from cart_store.exceptions import InvalidCombinationError, InvalidQuantityError
from cart_store.models.cart import CartItem, UpdateResult
from cart_store.models.config import DEFAULT_STORAGE_KEY, StoreConfig
from cart_store.storage.backends import KeyValueBackend, create_backend
from cart_store.utils.structured_logger import CartEventLogger

log = logging.getLogger(__name__)

EMPTY_CART = "[]"


def find_item_index(
    items: list[CartItem], product_id: str, color_id: str | None
) -> int:
    """Returns the index of the first item matching the combination, or -1."""
    for index, item in enumerate(items):
        if item.matches(product_id, color_id):
            return index
    return -1


class CartStore:
    """Adds, removes, updates and totals cart items held in a key-value backend."""

    def __init__(
        self,
        backend: KeyValueBackend,
        storage_key: str = DEFAULT_STORAGE_KEY,
        validate_qty: bool = False,
        event_logger: CartEventLogger | None = None,
    ):
        """
        Args:
            backend: Any object with ``get(key)`` and ``set(key, value)``.
            storage_key: The backend slot holding the serialized cart.
            validate_qty: Reject negative or non-numeric quantities.
            event_logger: Optional recorder for cart mutations.
        """
        self.backend = backend
        self.storage_key = storage_key
        self.validate_qty = validate_qty
        self.events = event_logger

    @classmethod
    def from_config(
        cls, config: StoreConfig, event_logger: CartEventLogger | None = None
    ) -> "CartStore":
        """Builds a store and its backend from a validated configuration."""
        return cls(
            create_backend(config),
            storage_key=config.storage_key,
            validate_qty=config.validate_qty,
            event_logger=event_logger,
        )

    def get_items(self) -> list[CartItem]:
        """Gets the list of all cart items, read fresh from the backend."""
        return self.get_storage()

    def add_item(self, product_id: str, color_id: str | None, qty: float) -> None:
        """
        Adds a quantity of a product in the given color.

        An existing line for the same combination has its quantity increased;
        otherwise a new line is appended.
        """
        self._check_qty(qty)
        storage = self.get_storage()
        index = find_item_index(storage, product_id, color_id)

        if index != -1:
            storage[index].qty += qty
            new_qty = storage[index].qty
        else:
            storage.append(CartItem(product_id=product_id, color_id=color_id, qty=qty))
            new_qty = qty

        self.save_storage(storage)
        log.debug(f"Added {qty} x {product_id} ({color_id}), line now {new_qty}.")
        if self.events:
            self.events.item_added(product_id, color_id, qty, new_qty)

    def remove_item(self, product_id: str, color_id: str | None) -> None:
        """Removes every line matching the combination. Missing lines are ignored."""
        storage = self.get_storage()
        remaining = [
            item for item in storage if not item.matches(product_id, color_id)
        ]
        self.save_storage(remaining)

        removed = len(storage) - len(remaining)
        log.debug(f"Removed {removed} line(s) for {product_id} ({color_id}).")
        if self.events:
            self.events.item_removed(product_id, color_id, removed)

    def update_qty(
        self, product_id: str, color_id: str | None, qty: float
    ) -> CartItem:
        """
        Sets the quantity of an existing line and returns the updated line.

        Raises:
            InvalidCombinationError: If no line matches the combination. Storage
            is left untouched.
        """
        self._check_qty(qty)
        storage = self.get_storage()
        index = find_item_index(storage, product_id, color_id)

        if index == -1:
            if self.events:
                self.events.update_rejected(product_id, color_id)
            raise InvalidCombinationError(product_id, color_id)

        old_qty = storage[index].qty
        storage[index].qty = qty
        self.save_storage(storage)
        log.debug(f"Updated {product_id} ({color_id}) from {old_qty} to {qty}.")
        if self.events:
            self.events.qty_updated(product_id, color_id, old_qty, qty)
        return storage[index]

    def try_update_qty(
        self, product_id: str, color_id: str | None, qty: float
    ) -> UpdateResult:
        """Like update_qty, but reports a missing line in the result."""
        try:
            item = self.update_qty(product_id, color_id, qty)
        except InvalidCombinationError as e:
            return UpdateResult.failure(e)
        return UpdateResult.success(item)

    def clear(self) -> None:
        """Clears the shopping cart."""
        self.save_storage([])
        log.debug("Cart cleared.")
        if self.events:
            self.events.cart_cleared()

    def total_items(self) -> int | float:
        """Returns the sum of quantities across all lines."""
        return sum((item.qty for item in self.get_storage()), 0)

    def initialize_storage(self) -> None:
        """Creates the empty cart slot if the backend does not have one yet."""
        if self.backend.get(self.storage_key) is None:
            log.debug(f"Initializing empty cart under key '{self.storage_key}'.")
            self.backend.set(self.storage_key, EMPTY_CART)

    def get_storage(self) -> list[CartItem]:
        """
        Reads and parses the stored cart.

        A malformed stored value is not guarded against: the JSON or validation
        error propagates to the caller.
        """
        self.initialize_storage()
        raw = self.backend.get(self.storage_key)
        return [CartItem.model_validate(entry) for entry in json.loads(raw)]

    def save_storage(self, items: list[CartItem]) -> None:
        """Serializes the items and writes them to the cart slot."""
        payload = json.dumps(
            [item.to_storage() for item in items],
            separators=(",", ":"),
            ensure_ascii=False,
        )
        self.backend.set(self.storage_key, payload)

    def _check_qty(self, qty) -> None:
        if not self.validate_qty:
            return
        if isinstance(qty, bool) or not isinstance(qty, Real):
            raise InvalidQuantityError(f"Quantity must be a number, got {qty!r}.")
        if qty < 0:
            raise InvalidQuantityError(f"Quantity cannot be negative, got {qty}.")
