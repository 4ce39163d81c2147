from __future__ import annotations

import importlib
import json
import sys

import pytest
import requests

from services import openai_api


class FakeResponse:
    def __init__(self, status_code: int, payload: object):
        self.status_code = status_code
        self._payload = payload

    def json(self) -> object:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def _completion_body(content: str) -> dict[str, object]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def reload_openai_api(monkeypatch, **env):
    for key, value in env.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    import services

    monkeypatch.setattr(services, "openai_api", openai_api)
    monkeypatch.delitem(sys.modules, "services.openai_api")
    return importlib.import_module("services.openai_api")


def test_complete_sends_bearer_request(monkeypatch):
    captured: dict[str, object] = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        captured.update(url=url, json=json, headers=headers, timeout=timeout)
        return FakeResponse(200, _completion_body('{"text": "T"}'))

    monkeypatch.setattr(openai_api.requests, "post", fake_post)
    transport = openai_api.OpenAIChatTransport(
        url="https://example.test/v1/chat/completions",
        model="gpt-4",
        temperature=0.7,
        max_tokens=1000,
        timeout=5,
    )

    content = transport.complete("Tell me a story", api_key=" sk-test ")

    assert content == '{"text": "T"}'
    assert captured["url"] == "https://example.test/v1/chat/completions"
    assert captured["headers"] == {
        "Content-Type": "application/json",
        "Authorization": "Bearer sk-test",
    }
    assert captured["json"] == {
        "model": "gpt-4",
        "messages": [{"role": "user", "content": "Tell me a story"}],
        "temperature": 0.7,
        "max_tokens": 1000,
    }
    assert captured["timeout"] == 5


def test_complete_uses_injected_post():
    calls: list[str] = []

    def fake_post(url, **_kwargs):
        calls.append(url)
        return FakeResponse(200, _completion_body("hello"))

    transport = openai_api.OpenAIChatTransport(url="https://example.test", post=fake_post)
    assert transport.complete("prompt", api_key="key") == "hello"
    assert calls == ["https://example.test"]


def test_complete_raises_api_message_on_error_status():
    def fake_post(*_args, **_kwargs):
        return FakeResponse(429, {"error": {"message": "rate limited"}})

    transport = openai_api.OpenAIChatTransport(post=fake_post)
    with pytest.raises(openai_api.CompletionAPIError) as excinfo:
        transport.complete("prompt", api_key="key")

    assert str(excinfo.value) == "rate limited"
    assert excinfo.value.status_code == 429


@pytest.mark.parametrize(
    "payload",
    [
        {"error": {}},
        {"detail": "nope"},
        json.JSONDecodeError("Expecting value", "", 0),
    ],
)
def test_complete_falls_back_to_unknown_error(payload):
    transport = openai_api.OpenAIChatTransport(post=lambda *_a, **_k: FakeResponse(500, payload))
    with pytest.raises(openai_api.CompletionAPIError, match="Unknown API error"):
        transport.complete("prompt", api_key="key")


def test_complete_wraps_network_errors():
    def fake_post(*_args, **_kwargs):
        raise requests.ConnectionError("connection refused")

    transport = openai_api.OpenAIChatTransport(post=fake_post)
    with pytest.raises(openai_api.CompletionAPIError, match="connection refused"):
        transport.complete("prompt", api_key="key")


def test_complete_requires_api_key():
    def fail_post(*_args, **_kwargs):  # pragma: no cover - must not be reached
        raise AssertionError("request must not be sent without a key")

    transport = openai_api.OpenAIChatTransport(post=fail_post)
    with pytest.raises(openai_api.CompletionAPIError, match="API key is not configured"):
        transport.complete("prompt", api_key="   ")


def test_complete_rejects_unexpected_envelope():
    transport = openai_api.OpenAIChatTransport(post=lambda *_a, **_k: FakeResponse(200, {"choices": []}))
    with pytest.raises(openai_api.StoryFormatError, match="Unexpected completion response shape"):
        transport.complete("prompt", api_key="key")


def test_settings_read_from_environment(monkeypatch):
    module = reload_openai_api(
        monkeypatch,
        OPENAI_API_URL="https://proxy.test/v1/chat/completions",
        OPENAI_MODEL="gpt-4o-mini",
        OPENAI_TEMPERATURE="0.2",
        OPENAI_MAX_TOKENS="512",
        OPENAI_TIMEOUT="not-a-number",
    )
    assert module.API_URL == "https://proxy.test/v1/chat/completions"
    assert module.MODEL == "gpt-4o-mini"
    assert module.TEMPERATURE == pytest.approx(0.2)
    assert module.MAX_TOKENS == 512
    assert module.REQUEST_TIMEOUT == 60.0

    transport = module.OpenAIChatTransport()
    assert transport.model == "gpt-4o-mini"
    assert transport.max_tokens == 512
