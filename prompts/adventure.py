"""Adventure prompt assembly helpers for chat-completion calls."""
from __future__ import annotations

from typing import Iterable

RESPONSE_FORMAT = (
    "Format your response as JSON with the following structure: "
    '{"text": "story paragraph", "art": "ASCII art", "choices": ["choice 1", "choice 2"]}'
)

ART_GUIDANCE = "Include a simple ASCII art scene (around 10-15 lines) that represents the {subject}. "


def join_story_text(texts: Iterable[str]) -> str:
    """Concatenate segment texts into the story-so-far context block."""

    return "\n\n".join(texts)


def build_start_prompt() -> str:
    return (
        "You are creating a choose-your-own-adventure story. "
        "Start a new adventure story with a compelling first paragraph. "
        + ART_GUIDANCE.format(subject="setting")
        + "End with exactly two distinct choices for how the player might proceed. "
        + RESPONSE_FORMAT
    )


def build_continue_prompt(story_so_far: str, selected_choice: str) -> str:
    return (
        "Continue the choose-your-own-adventure story. "
        "Here's the story so far:\n\n"
        f"{story_so_far}\n\n"
        f'The player chose: "{selected_choice}"\n\n'
        "Continue the story with a new paragraph based on this choice. "
        + ART_GUIDANCE.format(subject="new situation")
        + "End with exactly two distinct new choices for how the player might proceed. "
        + RESPONSE_FORMAT
    )


__all__ = [
    "ART_GUIDANCE",
    "RESPONSE_FORMAT",
    "build_continue_prompt",
    "build_start_prompt",
    "join_story_text",
]
