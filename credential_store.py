"""Persistence for the completion API credential."""
from __future__ import annotations

import json
import logging
import os
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, Protocol

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

CREDENTIAL_KEY = "openai_api_key"

# "file" shares one saved key with every visitor of this server; opt-in for single-user local runs.
CREDENTIAL_STORE_MODE_RAW = (os.getenv("ADVENTURE_CREDENTIAL_STORE") or "session").strip().lower()
CREDENTIAL_STORE_MODE = "file" if CREDENTIAL_STORE_MODE_RAW == "file" else "session"
CREDENTIAL_PATH = Path(
    (os.getenv("ADVENTURE_CREDENTIAL_PATH") or "").strip()
    or Path.home() / ".adventure" / "credentials.json"
).expanduser()


class CredentialStore(Protocol):
    def get(self) -> str | None:
        ...

    def set(self, value: str) -> None:
        ...

    def remove(self) -> None:
        ...


class MemoryCredentialStore:
    """Process-local store, mostly useful for tests."""

    def __init__(self, value: str | None = None) -> None:
        self._value = value

    def get(self) -> str | None:
        return self._value or None

    def set(self, value: str) -> None:
        self._value = value

    def remove(self) -> None:
        self._value = None


class SessionCredentialStore:
    """Keeps the credential in the visitor's session mapping only."""

    def __init__(self, backing: MutableMapping[str, Any], key: str = f"_stored_{CREDENTIAL_KEY}") -> None:
        self._backing = backing
        self._key = key

    def get(self) -> str | None:
        value = self._backing.get(self._key)
        return str(value) if value else None

    def set(self, value: str) -> None:
        self._backing[self._key] = value

    def remove(self) -> None:
        self._backing.pop(self._key, None)


class FileCredentialStore:
    """JSON file holding the credential under a fixed key, readable by the owner only."""

    def __init__(self, path: str | Path = CREDENTIAL_PATH, key: str = CREDENTIAL_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def _read(self) -> dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as fp:
                payload = json.load(fp)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable credential file %s: %s", self.path, exc)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write(self, payload: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fp:
            json.dump(payload, fp)

    def get(self) -> str | None:
        value = self._read().get(self.key)
        if not isinstance(value, str) or not value.strip():
            return None
        return value

    def set(self, value: str) -> None:
        payload = self._read()
        payload[self.key] = value
        self._write(payload)

    def remove(self) -> None:
        payload = self._read()
        if self.key not in payload:
            return
        payload.pop(self.key)
        if payload:
            self._write(payload)
        else:
            self.path.unlink(missing_ok=True)


def default_credential_store(session: MutableMapping[str, Any]) -> CredentialStore:
    if CREDENTIAL_STORE_MODE == "session":
        return SessionCredentialStore(session)
    return FileCredentialStore(CREDENTIAL_PATH)


__all__ = [
    "CREDENTIAL_KEY",
    "CREDENTIAL_PATH",
    "CREDENTIAL_STORE_MODE",
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "SessionCredentialStore",
    "default_credential_store",
]
