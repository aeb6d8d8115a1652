"""MCP tools: add_item, get_items, remove_item."""

from shopping_list.domains.mcp.tools.shopping_list import (
    add_item,
    get_default_cart,
    get_items,
    remove_item,
)

__all__ = ["add_item", "get_default_cart", "get_items", "remove_item"]
