"""
LLM function-calling schemas for the shopping list tools. OpenAI-compatible format.
"""

from typing import Any, Callable

from shopping_list.domains.mcp.tools.shopping_list import add_item, get_items, remove_item

# OpenAI/Grok function calling format: list of tool definitions
TOOLS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "add_item",
            "description": "Add an item to the shopping list or update its quantity. Specify item name and quantity.",
            "parameters": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Item name, e.g. Milk"},
                    "quantity": {"type": "integer", "description": "How many to add (must be at least 1)"},
                },
                "required": ["name", "quantity"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "get_items",
            "description": "Get all items currently in the shopping list. Returns a list of items with their names and quantities.",
            "parameters": {"type": "object", "properties": {}},
        },
    },
    {
        "type": "function",
        "function": {
            "name": "remove_item",
            "description": "Remove a specified quantity of an item from the shopping list. Specify item name and quantity to remove. If quantity is not specified or is greater than item quantity, the item is removed.",
            "parameters": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Item name to remove"},
                    "quantity": {
                        "type": "integer",
                        "description": "Optional: how many to remove. Omit to remove the item entirely.",
                    },
                },
                "required": ["name"],
            },
        },
    },
]


def get_tool_definitions() -> list[dict[str, Any]]:
    """Return Grok/OpenAI-compatible tool definitions for function calling."""
    return [t.copy() for t in TOOLS]


def get_tool_registry() -> dict[str, Callable[..., Any]]:
    """Map tool name -> callable for execute_tool_call."""
    return {
        "add_item": add_item,
        "get_items": get_items,
        "remove_item": remove_item,
    }
