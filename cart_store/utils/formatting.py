"""
Helper functions for formatting cart data into human-readable strings.
"""

from cart_store.models.cart import CartItem


def format_color(color_id: str | None) -> str:
    """Renders a missing color as a dash so it is not confused with an empty id."""
    if color_id is None:
        return "-"
    if color_id == "":
        return '""'
    return color_id


def format_qty(qty: int | float) -> str:
    """Formats a quantity, dropping a trailing '.0' from whole floats."""
    if isinstance(qty, float) and qty.is_integer():
        return str(int(qty))
    return str(qty)


def describe_item(item: CartItem) -> str:
    """One-line description of a cart line (e.g. '2 x shirt (red)')."""
    return f"{format_qty(item.qty)} x {item.product_id} ({format_color(item.color_id)})"
