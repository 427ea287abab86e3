"""
Data Models Layer.

This package contains the models that define the core data structures
used throughout the application, such as cart items and configuration.
"""

from .cart import CartItem, UpdateResult
from .config import StoreConfig

__all__ = ["CartItem", "StoreConfig", "UpdateResult"]
