"""
Tests for ConversationManager: send/clear and pickling for Streamlit session state.
"""

from __future__ import annotations

import pickle
from unittest.mock import MagicMock

from shopping_list.domains.cart import ShoppingCart
from shopping_list.domains.mcp.tools import get_default_cart
from shopping_list.orchestration.conversation_manager import MAX_MESSAGES, ConversationManager


def test_send_appends_history_and_returns_items() -> None:
    cart = ShoppingCart()
    mock_client = MagicMock()
    mock_client.chat.return_value = {
        "message": {"role": "assistant", "content": "Added milk."},
        "items": [{"name": "milk", "quantity": 1}],
    }
    manager = ConversationManager(client=mock_client, cart=cart)

    out = manager.send("add milk")

    assert out == {"content": "Added milk.", "items": [{"name": "milk", "quantity": 1}]}
    roles = [m["role"] for m in manager.messages]
    assert roles == ["system", "user", "assistant"]
    sent = mock_client.chat.call_args.args[0]
    assert sent[-1] == {"role": "user", "content": "add milk"}


def test_clear_keeps_cart() -> None:
    cart = ShoppingCart()
    cart.add_item("milk", 1)
    manager = ConversationManager(client=MagicMock(), cart=cart)
    manager._messages.append({"role": "user", "content": "hi"})
    manager.clear()
    assert len(manager.messages) == 1
    assert manager.cart is cart
    assert len(cart) == 1


def test_default_cart_is_shared_with_tools() -> None:
    """Without an explicit cart, the manager uses the same cart as the tool functions."""
    manager = ConversationManager(client=MagicMock())
    assert manager.cart is get_default_cart()


def test_conversation_manager_serialization() -> None:
    """ConversationManager can be pickled (required for Streamlit session state)."""
    manager = ConversationManager(client=MagicMock(), cart=ShoppingCart())
    manager.cart.add_item("milk", 2)
    manager._messages.append({"role": "user", "content": "Test message"})
    manager._messages.append({"role": "assistant", "content": "Test response"})

    unpickled = pickle.loads(pickle.dumps(manager))

    assert len(unpickled.messages) == 3
    assert unpickled._client is None
    assert unpickled.cart is get_default_cart()


def test_serialization_limits_history() -> None:
    manager = ConversationManager(client=MagicMock())
    for i in range(50):
        manager._messages.append({"role": "user", "content": f"Message {i}" * 1000})

    unpickled = pickle.loads(pickle.dumps(manager))

    assert len(unpickled.messages) <= MAX_MESSAGES
    assert unpickled.messages[0]["role"] == "system"
    assert unpickled.messages[-1]["content"].startswith("Message 49")
    assert all(len(m["content"]) < 6000 for m in unpickled.messages)
