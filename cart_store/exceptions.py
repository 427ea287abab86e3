"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class CartStoreError(Exception):
    """Base exception for all application-specific errors."""


class InvalidCombinationError(CartStoreError):
    """Raised when no cart item matches the given product and color combination."""

    def __init__(self, product_id: str, color_id: str | None):
        self.product_id = product_id
        self.color_id = color_id
        super().__init__(
            "Invalid product+color combination: "
            f"{product_id}, {'null' if color_id is None else color_id}"
        )


class InvalidQuantityError(CartStoreError):
    """Raised when quantity validation is enabled and a quantity is rejected."""


class ConfigurationError(CartStoreError):
    """Raised for issues related to configuration loading or validation."""


class BackendError(CartStoreError):
    """Raised when the key-value backend fails to read or write a value."""
