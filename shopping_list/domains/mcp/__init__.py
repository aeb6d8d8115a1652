"""MCP domain: shopping list tools and their function-calling schemas."""
