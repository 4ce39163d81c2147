"""Styling helpers for Streamlit layouts."""
from __future__ import annotations

import html

import streamlit as st


def render_app_styles() -> None:
    """Apply global styling, including the terminal look of the ASCII art panels."""
    base_css = """
    <style>
    [data-testid="stHeader"] {
        background: rgba(0, 0, 0, 0);
    }
    .ascii-art {
        background-color: #1f2937;
        color: #4ade80;
        font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace;
        font-size: 0.85rem;
        line-height: 1.2;
        padding: 1rem;
        border-radius: 8px;
        overflow-x: auto;
        white-space: pre;
        margin-bottom: 1rem;
    }
    .story-text {
        font-size: 1.1rem;
        line-height: 1.65;
        margin-bottom: 2rem;
    }
    </style>
    """
    st.markdown(base_css, unsafe_allow_html=True)


def ascii_art_html(art: str) -> str:
    return f"<pre class='ascii-art'>{html.escape(art or '')}</pre>"


def story_text_html(text: str) -> str:
    return f"<p class='story-text'>{html.escape(text or '')}</p>"


__all__ = ["ascii_art_html", "render_app_styles", "story_text_html"]
