"""OpenAI chat-completion transport and configuration helpers."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Protocol

import requests
from dotenv import load_dotenv

from utils.secrets import mask_credential

load_dotenv()

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default


API_URL = (os.getenv("OPENAI_API_URL") or "").strip() or "https://api.openai.com/v1/chat/completions"
MODEL = (os.getenv("OPENAI_MODEL") or "").strip() or "gpt-4"
TEMPERATURE = _env_float("OPENAI_TEMPERATURE", 0.7)
MAX_TOKENS = _env_int("OPENAI_MAX_TOKENS", 1000)
REQUEST_TIMEOUT = _env_float("OPENAI_TIMEOUT", 60.0)

UNKNOWN_API_ERROR = "Unknown API error"


class CompletionAPIError(RuntimeError):
    """Raised when the completion endpoint cannot be reached or rejects a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoryFormatError(ValueError):
    """Raised when a completion reply does not have the expected shape."""


class ChatCompletionTransport(Protocol):
    def complete(self, prompt: str, *, api_key: str) -> str:
        ...


def missing_api_key_error() -> CompletionAPIError:
    return CompletionAPIError("API key is not configured.")


def build_request_payload(prompt: str, *, model: str, temperature: float, max_tokens: int) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": temperature,
        "max_tokens": max_tokens,
    }


def extract_error_message(body: Any) -> str:
    """Pull ``error.message`` out of an error response body."""

    if isinstance(body, Mapping):
        error = body.get("error")
        if isinstance(error, Mapping):
            message = str(error.get("message") or "").strip()
            if message:
                return message
    return UNKNOWN_API_ERROR


def extract_message_content(body: Any) -> str:
    """Return ``choices[0].message.content`` from a successful response body."""

    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise StoryFormatError("Unexpected completion response shape") from exc
    if not isinstance(content, str):
        raise StoryFormatError("Completion content is not a string")
    return content


@dataclass
class OpenAIChatTransport:
    """Sends a single user message to a chat-completion endpoint."""

    url: str = API_URL
    model: str = MODEL
    temperature: float = TEMPERATURE
    max_tokens: int = MAX_TOKENS
    timeout: float | None = REQUEST_TIMEOUT
    post: Callable[..., Any] | None = field(default=None, repr=False)

    def complete(self, prompt: str, *, api_key: str) -> str:
        key = (api_key or "").strip()
        if not key:
            raise missing_api_key_error()

        payload = build_request_payload(
            prompt,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {key}",
        }
        post = self.post or requests.post

        try:
            response = post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Completion request failed (key %s): %s", mask_credential(key), exc)
            raise CompletionAPIError(f"Network error contacting completion API: {exc}") from exc

        status = int(response.status_code)
        if status < 200 or status >= 300:
            try:
                body = response.json()
            except (json.JSONDecodeError, ValueError):
                body = None
            message = extract_error_message(body)
            logger.warning("Completion API returned %s: %s", status, message)
            raise CompletionAPIError(message, status_code=status)

        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise StoryFormatError("Invalid response from completion API (non-JSON body)") from exc

        return extract_message_content(body)


__all__ = [
    "API_URL",
    "MODEL",
    "TEMPERATURE",
    "MAX_TOKENS",
    "REQUEST_TIMEOUT",
    "UNKNOWN_API_ERROR",
    "CompletionAPIError",
    "StoryFormatError",
    "ChatCompletionTransport",
    "OpenAIChatTransport",
    "build_request_payload",
    "extract_error_message",
    "extract_message_content",
    "missing_api_key_error",
]
