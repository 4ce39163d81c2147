"""Session proxy for wrapping Streamlit's session state mapping."""
from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Iterator

from completion_client import StorySegment


class AdventureSessionProxy:
    """Lightweight view over a Streamlit ``session_state`` mapping."""

    def __init__(self, backing: MutableMapping[str, Any]):
        self._backing = backing

    # Basic mapping compatibility -------------------------------------------------
    def __getitem__(self, key: str) -> Any:
        return self._backing[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._backing[key] = value

    def __contains__(self, key: object) -> bool:  # pragma: no cover - mapping helper
        return key in self._backing

    def get(self, key: str, default: Any = None) -> Any:
        return self._backing.get(key, default)

    def setdefault(self, key: str, default: Any) -> Any:
        return self._backing.setdefault(key, default)

    def pop(self, key: str, default: Any | None = None) -> Any:
        return self._backing.pop(key, default)

    def keys(self) -> Iterator[str]:  # pragma: no cover - mapping helper
        return iter(self._backing.keys())

    # Adventure accessors ---------------------------------------------------------
    @property
    def api_key(self) -> str:
        return str(self._backing.get("api_key") or "")

    @api_key.setter
    def api_key(self, value: str | None) -> None:
        self._backing["api_key"] = value or ""

    @property
    def segments(self) -> list[StorySegment]:
        return list(self._backing.get("story_segments") or [])

    @segments.setter
    def segments(self, value: list[StorySegment]) -> None:
        self._backing["story_segments"] = list(value)

    @property
    def choices(self) -> list[str]:
        return list(self._backing.get("choices") or [])

    @choices.setter
    def choices(self, value: list[str]) -> None:
        self._backing["choices"] = list(value)

    @property
    def loading(self) -> bool:
        return bool(self._backing.get("loading"))

    @loading.setter
    def loading(self, value: bool) -> None:
        self._backing["loading"] = bool(value)

    @property
    def error(self) -> str | None:
        return self._backing.get("error") or None

    @error.setter
    def error(self, value: str | None) -> None:
        self._backing["error"] = value

    @property
    def initialized(self) -> bool:
        return bool(self._backing.get("initialized"))

    @initialized.setter
    def initialized(self, value: bool) -> None:
        self._backing["initialized"] = bool(value)

    @property
    def last_action(self) -> dict[str, Any] | None:
        action = self._backing.get("last_action")
        return dict(action) if action else None

    @last_action.setter
    def last_action(self, value: dict[str, Any] | None) -> None:
        self._backing["last_action"] = dict(value) if value else None

    @property
    def backing(self) -> MutableMapping[str, Any]:
        return self._backing

    def as_dict(self) -> dict[str, Any]:  # pragma: no cover - convenience helper
        return dict(self._backing)


__all__ = ["AdventureSessionProxy"]
