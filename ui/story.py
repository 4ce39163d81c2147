"""Adventure view: story so far, choices, and error recovery."""
from __future__ import annotations

from typing import Sequence

import streamlit as st

from adventure import AdventureController
from completion_client import StorySegment
from ui.styles import ascii_art_html, story_text_html
from utils.secrets import mask_credential

LOADING_MESSAGE = "Loading next part of your adventure..."


def render_segments(segments: Sequence[StorySegment]) -> None:
    for segment in segments:
        st.markdown(ascii_art_html(segment.art), unsafe_allow_html=True)
        st.markdown(story_text_html(segment.text), unsafe_allow_html=True)


def _render_error(controller: AdventureController) -> None:
    st.error(controller.session.error)
    if st.button("Try Again", type="primary", key="retry_button"):
        with st.spinner(LOADING_MESSAGE):
            controller.retry()
        st.rerun()


def _render_choices(controller: AdventureController) -> None:
    choices = controller.session.choices
    if choices:
        st.subheader("What will you do?")
        for index, choice in enumerate(choices):
            if st.button(choice, key=f"choice_{index}", width='stretch'):
                with st.spinner(LOADING_MESSAGE):
                    controller.choose_option(index)
                st.rerun()

    label = "Start New Adventure" if choices else "Begin Adventure"
    if st.button(label, key="new_adventure_button"):
        with st.spinner(LOADING_MESSAGE):
            controller.begin_story()
        st.rerun()


def render_adventure(controller: AdventureController) -> None:
    session = controller.session

    render_segments(session.segments)

    if session.error:
        _render_error(controller)
    else:
        _render_choices(controller)

    st.divider()
    st.caption(f"API key in use ({mask_credential(session.api_key)}).")
    if st.button("Remove API Key", type="tertiary", key="remove_api_key_button"):
        controller.remove_credential()
        st.rerun()


__all__ = ["LOADING_MESSAGE", "render_adventure", "render_segments"]
