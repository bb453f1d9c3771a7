from __future__ import annotations

import streamlit as st
from loguru import logger

from replica_chat.config import get_settings
from replica_chat.manager import ChatSessionManager
from replica_chat.states import Role


settings = get_settings()

st.set_page_config(page_title="Sensay Replica Chat", page_icon="💬", layout="centered")

if "chat" not in st.session_state:
    st.session_state["chat"] = ChatSessionManager(credential=settings.api_key)
    logger.info(f"ui_session_start | api_key_from_env={settings.api_key is not None}")
chat: ChatSessionManager = st.session_state["chat"]
if "_show_config" not in st.session_state:
    st.session_state["_show_config"] = not chat.credential


def _apply_credential() -> None:
    chat.set_credential(st.session_state.get("api_key_input", ""))


def _toggle_config() -> None:
    st.session_state["_show_config"] = not st.session_state["_show_config"]


st.title("Sensay Replica Chat")

# Config panel
label = "Hide API Configuration" if st.session_state["_show_config"] else "Show API Configuration"
st.button(label, on_click=_toggle_config, type="tertiary")
if st.session_state["_show_config"]:
    with st.container(border=True):
        # Widget state is dropped while hidden; re-seed it from the manager
        if "api_key_input" not in st.session_state:
            st.session_state["api_key_input"] = chat.credential
        st.text_input(
            "Sensay API Key",
            type="password",
            key="api_key_input",
            placeholder="Your Sensay API Key",
            on_change=_apply_credential,
        )
        st.caption(
            "Kept in this browser session only. For development, set SENSAY_API_KEY_SECRET "
            "in the environment or a .env file.\n\n"
            "A user and replica are created or reused automatically when connecting."
        )

prompt = st.chat_input("Type your message...", disabled=chat.in_progress)
if prompt and chat.start_exchange(prompt):
    st.rerun()

if not chat.messages:
    st.info("Start a conversation with the Sensay AI")

for msg in chat.messages:
    name = "You" if msg.role == Role.USER else "Sensay AI"
    with st.chat_message(msg.role.value):
        if msg.role == Role.ASSISTANT and not msg.content and chat.in_progress:
            with st.spinner("Sending..."):
                chat.finish_exchange()
            st.rerun()
        st.caption(name)
        st.markdown(msg.as_markdown())

if chat.error:
    st.error(chat.error)

with st.sidebar:
    st.caption("Powered by Sensay Wisdom AI API")
    if st.button("Clear chat", disabled=chat.in_progress):
        chat.clear()
        st.rerun()
