"""
Concurrency tests for ShoppingCart: no lost updates, consistent snapshots.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from shopping_list.domains.cart import ShoppingCart, normalize_name


def test_concurrent_increments_are_not_lost() -> None:
    """N concurrent Add(name, 1) from absent end at quantity N, one entry."""
    cart = ShoppingCart()
    n = 500
    names = ["milk", "Milk", "MILK", " milk "]
    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda i: cart.add_item(names[i % len(names)], 1), range(n)))
    assert all(r.ok for r in results)
    items = cart.get_items()
    assert len(items) == 1
    assert items[0].quantity == n


def test_concurrent_partial_removes() -> None:
    """Each Remove(name, 1) takes exactly one unit; exactly one call removes the last."""
    cart = ShoppingCart()
    cart.add_item("eggs", 100)
    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: cart.remove_item("eggs", 1), range(100)))
    assert all(r.ok for r in results)
    assert sum(1 for r in results if r.remaining is None) == 1
    remaining = sorted(r.remaining for r in results if r.remaining is not None)
    assert remaining == list(range(1, 100))
    assert cart.get_items() == []


def test_snapshots_never_show_invalid_state() -> None:
    """List racing with Add/Remove sees no non-positive quantities or duplicate keys."""
    cart = ShoppingCart()
    stop = threading.Event()
    problems: list[str] = []

    def writer(name: str) -> None:
        while not stop.is_set():
            cart.add_item(name, 2)
            cart.remove_item(name.upper(), 1)
            cart.remove_item(name)

    def reader() -> None:
        for _ in range(2000):
            items = cart.get_items()
            keys = [normalize_name(i.name) for i in items]
            if len(keys) != len(set(keys)):
                problems.append(f"duplicate keys: {keys}")
            if any(i.quantity <= 0 for i in items):
                problems.append(f"non-positive quantity: {items}")

    writers = [threading.Thread(target=writer, args=(n,)) for n in ("apple", "Apple", "pear", "plum")]
    for t in writers:
        t.start()
    try:
        reader()
    finally:
        stop.set()
        for t in writers:
            t.join()
    assert problems == []
