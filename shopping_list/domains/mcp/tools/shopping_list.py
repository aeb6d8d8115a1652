"""
MCP Tools: add_item, get_items, remove_item.

Thin adapters over ShoppingCart that return JSON-serializable dicts for the
function-calling loop. Errors come back as {"error", "code"} instead of raising.
"""

from __future__ import annotations

import threading
from typing import Any

from shopping_list.domains.cart import CartResult, ShoppingCart

_default_cart: ShoppingCart | None = None
_default_cart_lock = threading.Lock()


def get_default_cart() -> ShoppingCart:
    """Process-wide cart used when a tool is called without one."""
    global _default_cart
    with _default_cart_lock:
        if _default_cart is None:
            _default_cart = ShoppingCart()
        return _default_cart


def _to_payload(result: CartResult) -> dict[str, Any]:
    if not result.ok:
        return {"error": result.message, "code": result.error.value if result.error else None}
    out: dict[str, Any] = {"message": result.message}
    if result.remaining is not None:
        out["remaining"] = result.remaining
    return out


def add_item(name: str, quantity: int, *, cart: ShoppingCart | None = None) -> dict[str, Any]:
    """Add an item to the shopping list or update its quantity."""
    if cart is None:
        cart = get_default_cart()
    return _to_payload(cart.add_item(name, quantity))


def get_items(*, cart: ShoppingCart | None = None) -> dict[str, Any]:
    """Return every item currently on the list as {"items": [{name, quantity}, ...]}."""
    if cart is None:
        cart = get_default_cart()
    return {"items": [item.to_dict() for item in cart.get_items()]}


def remove_item(
    name: str,
    quantity: int | None = None,
    *,
    cart: ShoppingCart | None = None,
) -> dict[str, Any]:
    """
    Remove `quantity` of an item. Omitted, zero or too-large quantities remove it entirely.
    """
    if cart is None:
        cart = get_default_cart()
    return _to_payload(cart.remove_item(name, quantity))
