"""Settings — tests for layered configuration.

Tests cover:
    - Built-in defaults when no document or environment is present
    - camelCase keys from the settings document
    - Environment overrides the document
    - Missing or malformed documents fall back to defaults without raising
"""

import json

import pytest

from codemode.config import SETTINGS_DOCUMENT_ENV, Settings, read_settings_document


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "codemode-config.json"
    monkeypatch.setenv(SETTINGS_DOCUMENT_ENV, str(path))
    monkeypatch.chdir(tmp_path)
    for var in ("PROXY_PORT", "CONFIG_DIRECTORIES", "RUNTIME_COMMAND", "EXECUTION_TIMEOUT_MS"):
        monkeypatch.delenv(var, raising=False)
    return path


def test_defaults(settings_file):
    settings = Settings()
    assert settings.proxy_port == 3001
    assert settings.proxy_host == "127.0.0.1"
    assert settings.config_directories == ["./"]
    assert settings.runtime_command == "deno"
    assert settings.execution_timeout_ms == 30_000
    assert settings.cors_origins == ["*"]


def test_document_camel_case_keys(settings_file):
    settings_file.write_text(json.dumps({
        "proxyPort": 4100,
        "configDirectories": ["~/", "./project"],
        "executionTimeoutMs": 5000,
    }))
    settings = Settings()
    assert settings.proxy_port == 4100
    assert settings.config_directories == ["~/", "./project"]
    assert settings.execution_timeout_ms == 5000


def test_environment_overrides_document(settings_file, monkeypatch):
    settings_file.write_text(json.dumps({"proxyPort": 4100, "runtimeCommand": "deno-doc"}))
    monkeypatch.setenv("PROXY_PORT", "4200")
    settings = Settings()
    assert settings.proxy_port == 4200
    assert settings.runtime_command == "deno-doc"


def test_environment_list_is_json(settings_file, monkeypatch):
    monkeypatch.setenv("CONFIG_DIRECTORIES", '["/etc/codemode", "./"]')
    assert Settings().config_directories == ["/etc/codemode", "./"]


def test_malformed_document_uses_defaults(settings_file):
    settings_file.write_text("{broken")
    assert Settings().proxy_port == 3001


def test_read_settings_document(tmp_path):
    assert read_settings_document(tmp_path / "missing.json") is None
    not_object = tmp_path / "list.json"
    not_object.write_text("[1]")
    assert read_settings_document(not_object) is None
    good = tmp_path / "good.json"
    good.write_text('{"proxyPort": 1}')
    assert read_settings_document(good) == {"proxyPort": 1}
