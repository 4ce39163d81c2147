"""Session state helpers for the Streamlit app."""
from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

import streamlit as st

from session_proxy import AdventureSessionProxy


_STATE_DEFAULTS: dict[str, Any] = {
    # Credential
    "api_key": "",
    "api_key_input": "",
    "credential_loaded": False,
    "credential_error": None,

    # Story artefacts
    "story_segments": [],
    "choices": [],
    "initialized": False,

    # Turn lifecycle
    "loading": False,
    "error": None,
    "last_action": None,
}

_STORY_KEYS = ("story_segments", "choices", "initialized", "loading", "error", "last_action")


def _proxy(backing: MutableMapping[str, Any] | None = None) -> AdventureSessionProxy:
    """Return a proxy around ``backing`` or the current Streamlit session state."""

    return AdventureSessionProxy(st.session_state if backing is None else backing)


def ensure_state(backing: MutableMapping[str, Any] | None = None) -> AdventureSessionProxy:
    proxy = _proxy(backing)
    for key, default in _STATE_DEFAULTS.items():
        if isinstance(default, list):
            default = list(default)
        proxy.setdefault(key, default)
    return proxy


def reset_story_state(backing: MutableMapping[str, Any] | None = None) -> None:
    proxy = _proxy(backing)
    for key in _STORY_KEYS:
        default = _STATE_DEFAULTS[key]
        proxy[key] = list(default) if isinstance(default, list) else default


def reset_all_state(backing: MutableMapping[str, Any] | None = None) -> None:
    """Return the session to the unauthenticated view."""

    proxy = _proxy(backing)
    reset_story_state(backing)
    proxy.api_key = ""
    proxy["api_key_input"] = ""
    proxy["credential_error"] = None


__all__ = [
    "ensure_state",
    "reset_story_state",
    "reset_all_state",
    "AdventureSessionProxy",
]
