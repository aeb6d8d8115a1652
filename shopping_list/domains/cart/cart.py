"""
Shopping cart aggregate: named items with quantities, safe for concurrent callers.

Items are keyed by the trimmed, lower-cased name. The first casing seen for a key
is the one shown back to callers. Every mutation runs under a single lock so the
lookup and the write for Add/Remove happen as one step.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any

from shopping_list.utils.logger import get_logger

logger = get_logger()


@dataclass(frozen=True)
class ShoppingItem:
    """Single list entry. `name` is the display name, fixed at first add."""

    name: str
    quantity: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "quantity": self.quantity}


class CartErrorKind(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class CartResult:
    """Outcome of a cart operation. Errors are returned here, not raised."""

    ok: bool
    message: str
    error: CartErrorKind | None = None
    item: ShoppingItem | None = None
    remaining: int | None = None

    @classmethod
    def failure(cls, kind: CartErrorKind, message: str) -> CartResult:
        return cls(ok=False, message=message, error=kind)


def normalize_name(name: str | None) -> str:
    """Return the lookup key for an item name ('' when blank)."""
    return (name or "").strip().lower()


class ShoppingCart:
    def __init__(self) -> None:
        self._items: dict[str, ShoppingItem] = {}
        self._lock = threading.Lock()

    def add_item(self, name: str, quantity: int) -> CartResult:
        """
        Add `quantity` of `name`, or increase the quantity if it is already listed.

        Rejects blank names and non-positive quantities without touching the cart.
        """
        key = normalize_name(name)
        if not key or quantity <= 0:
            logger.info("Rejected add: name=%r quantity=%r", name, quantity)
            return CartResult.failure(CartErrorKind.INVALID_ARGUMENT, "Error: Invalid item name or quantity.")

        with self._lock:
            existing = self._items.get(key)
            if existing is None:
                item = ShoppingItem(name.strip(), quantity)
            else:
                item = ShoppingItem(existing.name, existing.quantity + quantity)
            self._items[key] = item

        logger.debug("Added %d of %s (now %d)", quantity, item.name, item.quantity)
        return CartResult(ok=True, message=f"Added {quantity} of {name} to the shopping list.", item=item)

    def get_items(self) -> list[ShoppingItem]:
        """Snapshot of all items. Later mutations do not affect the returned list."""
        with self._lock:
            return list(self._items.values())

    def remove_item(self, name: str, quantity: int | None = None) -> CartResult:
        """
        Remove `quantity` of `name` from the list.

        A missing, non-positive, or too-large quantity removes the item entirely.
        Unknown items are reported as NOT_FOUND.
        """
        key = normalize_name(name)
        if not key:
            logger.info("Rejected remove: name=%r", name)
            return CartResult.failure(CartErrorKind.INVALID_ARGUMENT, "Error: Invalid item name.")

        with self._lock:
            item = self._items.get(key)
            if item is None:
                remaining = None
            elif quantity is None or quantity <= 0 or quantity >= item.quantity:
                del self._items[key]
                remaining = 0
            else:
                item = ShoppingItem(item.name, item.quantity - quantity)
                self._items[key] = item
                remaining = item.quantity

        if remaining is None:
            logger.info("Remove of unknown item %r", name)
            return CartResult.failure(CartErrorKind.NOT_FOUND, f"Error: Item '{name}' not found in the shopping list.")
        if remaining == 0:
            logger.debug("Removed %s", item.name)
            return CartResult(ok=True, message=f"Removed '{name}' from the shopping list.", item=item)
        logger.debug("Removed %d of %s (now %d)", quantity, item.name, remaining)
        return CartResult(
            ok=True,
            message=f"Removed {quantity} of '{name}'. Remaining quantity: {remaining}.",
            item=item,
            remaining=remaining,
        )

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
