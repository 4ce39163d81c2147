"""Completion client: reply parsing and story-turn requests."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Tuple

from services.openai_api import ChatCompletionTransport, StoryFormatError

CHOICE_COUNT = 2


@dataclass(frozen=True, slots=True)
class StorySegment:
    text: str
    art: str


@dataclass(frozen=True, slots=True)
class StoryTurn:
    """One parsed completion reply: a segment plus the next choice set."""

    text: str
    art: str
    choices: Tuple[str, str]

    @property
    def segment(self) -> StorySegment:
        return StorySegment(text=self.text, art=self.art)


def _strip_json_code_fence(text: str) -> str:
    """Remove ```json fences some models wrap around JSON replies."""

    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`").strip()
        # The language tag may share a line with the payload: ```json {...}```
        if cleaned[:4].lower() == "json":
            cleaned = cleaned[4:].strip()
    return cleaned


def _require_str(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise StoryFormatError(f"Response is missing a '{key}' string")
    return value


def parse_story_turn(raw: str) -> StoryTurn:
    """Decode and validate a ``{text, art, choices}`` reply."""

    try:
        data: Any = json.loads(_strip_json_code_fence(raw or ""))
    except json.JSONDecodeError as exc:
        raise StoryFormatError(f"Response is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise StoryFormatError("Response JSON is not an object")

    text = _require_str(data, "text")
    art = _require_str(data, "art")

    choices = data.get("choices")
    if not isinstance(choices, list) or not all(isinstance(choice, str) for choice in choices):
        raise StoryFormatError("Response is missing a 'choices' list of strings")
    if len(choices) != CHOICE_COUNT:
        raise StoryFormatError(f"Expected exactly {CHOICE_COUNT} choices, got {len(choices)}")

    return StoryTurn(text=text, art=art, choices=(choices[0], choices[1]))


def request_story_turn(prompt: str, *, api_key: str, transport: ChatCompletionTransport) -> StoryTurn:
    content = transport.complete(prompt, api_key=api_key)
    return parse_story_turn(content)


__all__ = [
    "CHOICE_COUNT",
    "StorySegment",
    "StoryTurn",
    "parse_story_turn",
    "request_story_turn",
]
