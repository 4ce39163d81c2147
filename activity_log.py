"""Activity logging helpers backed by the standard logging stack."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

_LOGGER = logging.getLogger(__name__)

ACTIVITY_LOG_ENABLED = (os.getenv("ACTIVITY_LOG_ENABLED", "true").strip().lower() not in {"0", "false", "no"})

_MAX_PARAMS = 5


@dataclass(slots=True)
class ActivityLogEntry:
    """Structured representation of an activity log event."""

    type: str
    action: str
    result: str
    timestamp: datetime
    params: tuple[str | None, ...] = field(default_factory=tuple)
    metadata: Mapping[str, Any] | None = None


def is_activity_logging_enabled() -> bool:
    return ACTIVITY_LOG_ENABLED


def _normalize_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _normalize_result(result: str) -> str:
    normalized = _normalize_string(result).lower()
    if normalized in {"success", "fail"}:
        return normalized
    return "success" if normalized not in {"", "failure", "error"} else "fail"


def log_event(
    *,
    type: str,
    action: str,
    result: str,
    params: Sequence[Any] | None = None,
    metadata: Mapping[str, Any] | None = None,
) -> ActivityLogEntry | None:
    """Emit an activity event on the ``activity_log`` logger.

    Returns the recorded entry, or ``None`` when activity logging is disabled.
    Never pass the raw credential in ``params``.
    """

    if not ACTIVITY_LOG_ENABLED:
        return None

    normalized_params = tuple(
        _normalize_string(value) or None for value in list(params or [])[:_MAX_PARAMS]
    )
    entry = ActivityLogEntry(
        type=_normalize_string(type) or "unknown",
        action=_normalize_string(action) or "unknown",
        result=_normalize_result(result),
        timestamp=datetime.now(timezone.utc),
        params=normalized_params,
        metadata=dict(metadata) if metadata else None,
    )

    level = logging.INFO if entry.result == "success" else logging.WARNING
    _LOGGER.log(
        level,
        "activity type=%s action=%s result=%s params=%s",
        entry.type,
        entry.action,
        entry.result,
        list(entry.params),
        extra={"activity": entry},
    )
    return entry


__all__ = [
    "ActivityLogEntry",
    "ACTIVITY_LOG_ENABLED",
    "is_activity_logging_enabled",
    "log_event",
]
