"""
Data structures for cart line items and update outcomes.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from cart_store.exceptions import InvalidCombinationError


class CartItem(BaseModel):
    """
    One line entry in the cart, identified by its product and color.

    Serialized with the camelCase field names used in the stored cart:
    ``{"productId": ..., "colorId": ..., "qty": ...}``.
    """

    product_id: str = Field(alias="productId")
    color_id: str | None = Field(alias="colorId")
    # Numbers expected; kept as given. CartStore(validate_qty=True) checks it.
    qty: Any

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True

    def matches(self, product_id: str, color_id: str | None) -> bool:
        """Exact match on both ids. None only matches None."""
        return self.product_id == product_id and self.color_id == color_id

    def to_storage(self) -> dict:
        """Returns the item as a plain dict with the stored field names."""
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of a quantity update that does not raise on a missing item."""

    ok: bool
    item: CartItem | None = None
    error: InvalidCombinationError | None = None

    @classmethod
    def success(cls, item: CartItem) -> "UpdateResult":
        return cls(ok=True, item=item)

    @classmethod
    def failure(cls, error: InvalidCombinationError) -> "UpdateResult":
        return cls(ok=False, error=error)
