"""
Conversation state for the shopping list assistant.
"""

from __future__ import annotations

from typing import Any

from shopping_list.domains.cart import ShoppingCart
from shopping_list.domains.mcp.tools import get_default_cart
from shopping_list.orchestration.llm_client import SYSTEM_PROMPT, ChatClient
from shopping_list.utils.logger import get_logger

logger = get_logger()

MAX_MESSAGES = 20
MAX_CONTENT_CHARS = 5000


class ConversationManager:
    def __init__(
        self,
        client: ChatClient | None = None,
        cart: ShoppingCart | None = None,
    ) -> None:
        self.cart = cart if cart is not None else get_default_cart()
        self._client = client
        self._messages: list[dict[str, Any]] = [
            {"role": "system", "content": SYSTEM_PROMPT},
        ]

    def __getstate__(self) -> dict[str, Any]:
        """Drop the client and the cart (its lock cannot be pickled) and trim history.

        An unpickled manager is attached to the process-wide default cart.
        """
        messages = self._messages
        if len(messages) > MAX_MESSAGES:
            system_msg = messages[0] if messages[0].get("role") == "system" else None
            recent = messages[-(MAX_MESSAGES - 1):]
            messages = ([system_msg] + recent) if system_msg else recent

        sanitized = []
        for msg in messages:
            msg_copy = dict(msg)
            content = msg_copy.get("content")
            if isinstance(content, str) and len(content) > MAX_CONTENT_CHARS:
                msg_copy["content"] = content[:MAX_CONTENT_CHARS] + "... [truncated]"
            elif content is not None and not isinstance(content, str):
                msg_copy["content"] = str(content)[:MAX_CONTENT_CHARS]
            sanitized.append(msg_copy)
        return {"_messages": sanitized}

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._messages = state.get("_messages") or [{"role": "system", "content": SYSTEM_PROMPT}]
        self._client = None
        self.cart = get_default_cart()

    @property
    def messages(self) -> list[dict[str, Any]]:
        return list(self._messages)

    def _get_client(self) -> ChatClient:
        if self._client is None:
            self._client = ChatClient(cart=self.cart)
        return self._client

    def send(self, text: str) -> dict[str, Any]:
        """
        Send a user message and return the assistant reply.

        Returns {"content": str, "items": [{name, quantity}, ...]}. LLMRequestError
        from the client propagates; the user message stays in history either way.
        """
        self._messages.append({"role": "user", "content": text})
        out = self._get_client().chat(self._messages)
        msg = out.get("message") or {}
        content = msg.get("content") or ""
        self._messages.append({"role": "assistant", "content": content})
        logger.debug("Assistant reply (%d chars), %d items on list", len(content), len(out.get("items") or []))
        return {"content": content, "items": out.get("items") or []}

    def clear(self) -> None:
        """Reset chat history. The shopping list itself is kept."""
        self._messages = [{"role": "system", "content": SYSTEM_PROMPT}]
