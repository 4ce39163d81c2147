from __future__ import annotations

import importlib
import json
import os
import stat
import sys

import pytest

import credential_store


def test_file_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "credentials.json"
    store = credential_store.FileCredentialStore(path)

    assert store.get() is None

    store.set("sk-secret")
    assert store.get() == "sk-secret"
    assert json.loads(path.read_text(encoding="utf-8")) == {"openai_api_key": "sk-secret"}

    store.remove()
    assert store.get() is None
    assert not path.exists()


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions only")
def test_file_store_is_owner_only(tmp_path):
    path = tmp_path / "credentials.json"
    credential_store.FileCredentialStore(path).set("sk-secret")

    mode = stat.S_IMODE(path.stat().st_mode)
    assert mode & (stat.S_IRWXG | stat.S_IRWXO) == 0


def test_file_store_keeps_unrelated_keys(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps({"other": "value", "openai_api_key": "old"}), encoding="utf-8")
    store = credential_store.FileCredentialStore(path)

    store.remove()

    assert json.loads(path.read_text(encoding="utf-8")) == {"other": "value"}


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("{not json", encoding="utf-8")
    store = credential_store.FileCredentialStore(path)

    assert store.get() is None
    store.set("sk-new")
    assert store.get() == "sk-new"


def test_session_store_uses_backing_mapping():
    backing: dict = {}
    store = credential_store.SessionCredentialStore(backing)

    store.set("sk-session")
    assert store.get() == "sk-session"
    assert "sk-session" in backing.values()

    store.remove()
    assert store.get() is None
    store.remove()


def test_memory_store_treats_empty_as_missing():
    store = credential_store.MemoryCredentialStore("")
    assert store.get() is None
    store.set("sk-mem")
    assert store.get() == "sk-mem"


def test_default_store_follows_mode(monkeypatch, tmp_path):
    monkeypatch.setattr(credential_store, "CREDENTIAL_STORE_MODE", "session")
    assert isinstance(credential_store.default_credential_store({}), credential_store.SessionCredentialStore)

    monkeypatch.setattr(credential_store, "CREDENTIAL_STORE_MODE", "file")
    monkeypatch.setattr(credential_store, "CREDENTIAL_PATH", tmp_path / "creds.json")
    store = credential_store.default_credential_store({})
    assert isinstance(store, credential_store.FileCredentialStore)
    assert store.path == tmp_path / "creds.json"


def _reload_credential_store(monkeypatch, **env):
    for key, value in env.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    monkeypatch.delitem(sys.modules, "credential_store")
    return importlib.import_module("credential_store")


def test_session_store_is_the_default(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    module = _reload_credential_store(
        monkeypatch,
        ADVENTURE_CREDENTIAL_STORE="",
        ADVENTURE_CREDENTIAL_PATH="",
    )

    assert module.CREDENTIAL_STORE_MODE == "session"
    assert isinstance(module.default_credential_store({}), module.SessionCredentialStore)
    assert module.CREDENTIAL_PATH == tmp_path / ".adventure" / "credentials.json"


def test_file_store_requires_explicit_opt_in(monkeypatch, tmp_path):
    module = _reload_credential_store(
        monkeypatch,
        ADVENTURE_CREDENTIAL_STORE="File",
        ADVENTURE_CREDENTIAL_PATH=str(tmp_path / "creds.json"),
    )
    assert module.CREDENTIAL_STORE_MODE == "file"
    assert module.default_credential_store({}).path == tmp_path / "creds.json"

    module = _reload_credential_store(monkeypatch, ADVENTURE_CREDENTIAL_STORE="shared")
    assert module.CREDENTIAL_STORE_MODE == "session"
