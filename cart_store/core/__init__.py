"""
Core cart logic.

The `CartStore` keeps the cart as a single serialized list in a key-value
backend and performs every operation as a fresh read-modify-write.
"""

from .cart import CartStore, find_item_index

__all__ = ["CartStore", "find_item_index"]
