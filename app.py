# app.py
from __future__ import annotations

import streamlit as st

from adventure import AdventureController
from credential_store import default_credential_store
from services.openai_api import OpenAIChatTransport
from session_state import ensure_state
from ui.credential import render_credential_gate
from ui.story import LOADING_MESSAGE, render_adventure
from ui.styles import render_app_styles

st.set_page_config(page_title="Choose Your Own Adventure", page_icon="🗺️", layout="centered")

session = ensure_state()
controller = AdventureController(
    session,
    default_credential_store(st.session_state),
    OpenAIChatTransport(),
)

render_app_styles()
st.title("Choose Your Own Adventure")

if not session.get("credential_loaded"):
    with st.spinner(LOADING_MESSAGE):
        controller.initialize()

if not controller.has_credential:
    render_credential_gate(controller)
    st.stop()

render_adventure(controller)
