"""Credential gate shown until an API key is available."""
from __future__ import annotations

import streamlit as st

import credential_store
from adventure import AdventureController
from ui.story import LOADING_MESSAGE


def _storage_caption() -> str:
    if credential_store.CREDENTIAL_STORE_MODE == "file":
        return (
            "Your API key is saved to a file on the machine running this app and is "
            "reused by everyone who opens it. Only use this mode when you run the "
            "app for yourself. The key is never sent to any server except OpenAI."
        )
    return (
        "Your API key is kept only for this browser session and is never sent "
        "to any server except OpenAI."
    )


def render_credential_gate(controller: AdventureController) -> None:
    session = controller.session

    st.subheader("Enter OpenAI API Key")
    st.caption(_storage_caption())

    if session.get("credential_error"):
        st.error(session["credential_error"])

    with st.form("credential_form", clear_on_submit=False):
        api_key = st.text_input(
            "API key",
            type="password",
            placeholder="sk-...",
            key="api_key_input",
        )
        submitted = st.form_submit_button(
            "Save API Key & Start Adventure",
            type="primary",
            width='stretch',
        )

    if submitted:
        try:
            with st.spinner(LOADING_MESSAGE):
                controller.save_credential(api_key)
        except ValueError as exc:
            session["credential_error"] = str(exc)
        else:
            session["credential_error"] = None
        st.rerun()


__all__ = ["render_credential_gate"]
