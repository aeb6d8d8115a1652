"""Shopping cart aggregate."""

from shopping_list.domains.cart.cart import (
    CartErrorKind,
    CartResult,
    ShoppingCart,
    ShoppingItem,
    normalize_name,
)

__all__ = ["CartErrorKind", "CartResult", "ShoppingCart", "ShoppingItem", "normalize_name"]
