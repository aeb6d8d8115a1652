"""
Shopping List Assistant — Streamlit UI entry point.
"""

import streamlit as st

# Load .env first so updated API keys are used
from shopping_list.utils.config import load_config, llm_provider, llm_api_key
load_config()

from shopping_list.domains.cart import ShoppingCart
from shopping_list.orchestration.conversation_manager import ConversationManager
from shopping_list.orchestration.llm_client import LLMRequestError
from shopping_list.utils.logger import configure_logging, get_logger

configure_logging()
log = get_logger()

st.set_page_config(page_title="Shopping List Assistant", layout="wide")
st.title("Shopping List Assistant")


# One cart per server process; every browser session shares it.
@st.cache_resource
def get_cart() -> ShoppingCart:
    return ShoppingCart()


cart = get_cart()

if "conversation" not in st.session_state:
    st.session_state.conversation = ConversationManager(cart=cart)
else:
    # After deserialization, reattach the shared cart
    st.session_state.conversation.cart = cart
if "last_error" not in st.session_state:
    st.session_state.last_error = None

with st.sidebar:
    st.header("Shopping list")
    try:
        provider = llm_provider()
        key = llm_api_key()
        key_hint = f"…{key[-4:]}" if len(key) >= 4 else "…"
        st.caption(f"LLM: **{provider}** · Key: `{key_hint}`")
    except ValueError:
        st.caption("LLM: key not loaded (check .env)")

    items = cart.get_items()
    if items:
        st.table([item.to_dict() for item in items])
    else:
        st.caption("_The list is empty._")

    with st.form("add_form", clear_on_submit=True):
        name = st.text_input("Item")
        qty = st.number_input("Quantity", min_value=1, value=1, step=1)
        if st.form_submit_button("Add"):
            result = cart.add_item(name, int(qty))
            (st.success if result.ok else st.error)(result.message)

    with st.form("remove_form", clear_on_submit=True):
        name = st.text_input("Item to remove")
        qty = st.number_input("Quantity (0 = all)", min_value=0, value=0, step=1)
        if st.form_submit_button("Remove"):
            result = cart.remove_item(name, int(qty) or None)
            (st.success if result.ok else st.error)(result.message)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Clear chat", use_container_width=True):
            st.session_state.conversation.clear()
            st.session_state.last_error = None
            st.rerun()
    with col2:
        if st.button("Clear list", use_container_width=True):
            cart.clear()
            st.rerun()

for msg in st.session_state.conversation.messages:
    if msg.get("role") in ("user", "assistant") and msg.get("content"):
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

if st.session_state.last_error:
    st.error(st.session_state.last_error)

prompt = st.chat_input("e.g. add 2 cartons of milk and some eggs")
if prompt:
    st.session_state.last_error = None
    try:
        with st.spinner("Updating your list..."):
            st.session_state.conversation.send(prompt)
    except (LLMRequestError, ValueError) as e:
        log.error("Chat failed: %s", e)
        st.session_state.last_error = str(e)
    st.rerun()
