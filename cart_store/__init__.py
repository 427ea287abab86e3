"""
cart-store: a shopping-cart state manager backed by persistent key-value storage.
"""

__version__ = "1.0.0"

from cart_store.core.cart import CartStore  # noqa: E402
from cart_store.exceptions import (  # noqa: E402
    BackendError,
    CartStoreError,
    ConfigurationError,
    InvalidCombinationError,
    InvalidQuantityError,
)
from cart_store.models.cart import CartItem, UpdateResult  # noqa: E402
from cart_store.storage.backends import MemoryBackend  # noqa: E402

__all__ = [
    "BackendError",
    "CartItem",
    "CartStore",
    "CartStoreError",
    "ConfigurationError",
    "InvalidCombinationError",
    "InvalidQuantityError",
    "MemoryBackend",
    "UpdateResult",
    "__version__",
]
