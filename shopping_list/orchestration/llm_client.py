"""
Chat-completions wrapper (xAI Grok or Groq) with function calling over the shopping list tools.
"""

from __future__ import annotations

import json
import re
import time
from typing import Any

import requests

from shopping_list.domains.cart import ShoppingCart
from shopping_list.domains.mcp.registry import get_tool_definitions, get_tool_registry
from shopping_list.domains.mcp.tools import get_default_cart
from shopping_list.utils.config import (
    llm_api_key,
    llm_base_url,
    llm_max_tokens,
    llm_model,
    llm_timeout_seconds,
)
from shopping_list.utils.logger import get_logger

logger = get_logger()

MAX_RETRIES = 3
MAX_TOOL_LOOPS = 5

_RETRY_AFTER_RE = re.compile(r"try again in ([\d.]+)s", re.IGNORECASE)

SYSTEM_PROMPT = """You are a friendly shopping list assistant. You keep the user's shopping list up to date.

Available tools (use silently):
- add_item: add an item or increase its quantity
- get_items: read the current list
- remove_item: remove some or all of an item (omit quantity to remove it entirely)

Rules:
- Always use the tools to change or read the list; never guess what is on it.
- When the user asks to add several things, call add_item once per item.
- If a tool returns an error, explain it plainly (e.g. the item is not on the list) and ask what to do.
- NEVER mention tool names, function calls, or technical details in your reply.
- After changing the list, confirm briefly what changed."""


class LLMRequestError(RuntimeError):
    """Raised when the chat endpoint keeps failing after all retries."""

    def __init__(self, message: str, status: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


def _as_int(value: Any) -> int | None:
    """
    Coerce a tool argument to int. None/'' stay None; anything else must be a whole number.

    Floats like 2.0 are accepted; 0.5 or "2.5" are rejected rather than truncated.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid quantity: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Invalid quantity: {value!r}")
        return int(value)
    try:
        return int(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid quantity: {value!r}") from None


class ChatClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        cart: ShoppingCart | None = None,
    ) -> None:
        self._base_url = base_url or llm_base_url()
        self.api_key = api_key or llm_api_key()
        self.model = model or llm_model()
        self.max_tokens = llm_max_tokens()
        self.timeout = llm_timeout_seconds()
        self.cart = cart if cart is not None else get_default_cart()
        self._registry = get_tool_registry()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _retry_delay(attempt: int, status: int | None, body: str | None) -> float:
        """Exponential backoff; 429 responses that say 'try again in Ns' wait that long."""
        delay = float(2 ** attempt)
        if status == 429 and body:
            match = _RETRY_AFTER_RE.search(body)
            if match:
                return max(float(match.group(1)) + 0.5, 1.0)
            return max(5.0, delay * 2)
        return delay

    def _chat_request(self, messages: list[dict[str, Any]], tools: list[dict[str, Any]] | None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
        }
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = "auto"
        last_err: Exception | None = None
        status: int | None = None
        last_body: str | None = None
        for attempt in range(MAX_RETRIES):
            try:
                r = requests.post(
                    self._base_url,
                    headers=self._headers(),
                    json=payload,
                    timeout=self.timeout,
                )
                r.raise_for_status()
                return r.json()
            except requests.RequestException as e:
                last_err = e
                status = None
                last_body = None
                if e.response is not None:
                    status = e.response.status_code
                    last_body = e.response.text
                logger.warning("LLM API attempt %d failed: %s", attempt + 1, e)
                # Client errors other than rate limiting will not succeed on retry.
                if status is not None and 400 <= status < 500 and status != 429:
                    break
                if attempt < MAX_RETRIES - 1:
                    time.sleep(self._retry_delay(attempt, status, last_body))

        msg = f"LLM API failed after {attempt + 1} attempt(s): {last_err}"
        if last_body:
            msg += f"\n\nAPI response body:\n{last_body}"
        raise LLMRequestError(msg, status=status, body=last_body) from last_err

    def execute_tool_call(self, tool_name: str, arguments: dict[str, Any]) -> Any:
        fn = self._registry.get(tool_name)
        if not fn:
            return {"error": f"Unknown tool: {tool_name}"}
        try:
            if tool_name == "add_item":
                name = str(arguments.get("name") or "")
                quantity = _as_int(arguments.get("quantity"))
                return fn(name, quantity if quantity is not None else 0, cart=self.cart)
            if tool_name == "get_items":
                return fn(cart=self.cart)
            if tool_name == "remove_item":
                name = str(arguments.get("name") or "")
                return fn(name, _as_int(arguments.get("quantity")), cart=self.cart)
            return {"error": f"Tool {tool_name} not mapped in execute_tool_call"}
        except ValueError as e:
            return {"error": str(e), "code": "invalid_argument"}
        except Exception as e:
            logger.exception("Tool %s failed: %s", tool_name, e)
            return {"error": str(e)}

    def _snapshot(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.cart.get_items()]

    def chat(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """
        Send chat request. If the response contains tool_calls, execute them against
        the cart, append results, and call again (loop up to MAX_TOOL_LOOPS). Return
        the final assistant message plus the list as it stands afterwards.
        """
        if not tools:
            tools = get_tool_definitions()
        msgs = list(messages)
        if not msgs or msgs[0].get("role") != "system":
            msgs.insert(0, {"role": "system", "content": SYSTEM_PROMPT})

        for _ in range(MAX_TOOL_LOOPS):
            out = self._chat_request(msgs, tools)
            choices = out.get("choices") or []
            if not choices:
                return {
                    "message": {"role": "assistant", "content": "No response from the model."},
                    "usage": out.get("usage", {}),
                    "items": self._snapshot(),
                }
            msg = choices[0].get("message") or {}
            tool_calls = msg.get("tool_calls")
            if not tool_calls:
                return {"message": msg, "usage": out.get("usage", {}), "items": self._snapshot()}

            msgs.append(msg)
            for tc in tool_calls:
                fid = tc.get("id") or ""
                fn_name = (tc.get("function") or {}).get("name") or ""
                args_str = (tc.get("function") or {}).get("arguments") or "{}"
                try:
                    args = json.loads(args_str)
                except json.JSONDecodeError:
                    logger.warning("Unparseable arguments for %s: %s", fn_name, args_str[:200])
                    args = {}
                result = self.execute_tool_call(fn_name, args if isinstance(args, dict) else {})
                logger.info("Tool %s(%s) -> %s", fn_name, args, result)
                msgs.append({
                    "role": "tool",
                    "tool_call_id": fid,
                    "content": result if isinstance(result, str) else json.dumps(result, ensure_ascii=False),
                })

        return {
            "message": {"role": "assistant", "content": "Tool loop limit reached."},
            "usage": {},
            "items": self._snapshot(),
        }
