"""Service Config — tests for parsing service-definition documents.

Tests cover:
    - Entries parsed into ServiceConfig with tuple args and str env
    - `services` accepted when `mcpServers` is absent
    - The orchestrator's own entry is hidden from listing and lookup
    - Unusable entries and documents yield nothing instead of raising
    - Only launchable entries are listed
"""

import pytest

from codemode.core.service_config import (
    SELF_SERVICE_NAME,
    ServiceConfig,
    find_service,
    parse_service_entry,
    service_names,
)


def test_parse_full_entry():
    config = parse_service_entry(
        "github",
        {"command": "npx", "args": ["-y", "server-github"], "env": {"TOKEN": "x", "N": 3}},
    )
    assert config == ServiceConfig(
        name="github",
        launch_command="npx",
        launch_args=("-y", "server-github"),
        environment={"TOKEN": "x", "N": "3"},
    )


def test_parse_minimal_entry_defaults_args_and_env():
    config = parse_service_entry("fs", {"command": "fs-server"})
    assert config.launch_args == ()
    assert dict(config.environment) == {}


@pytest.mark.parametrize("raw", [
    None, "npx", [], {}, {"command": ""}, {"command": 42}, {"args": ["x"]},
])
def test_parse_unusable_entry_returns_none(raw):
    assert parse_service_entry("bad", raw) is None


def test_parse_non_list_args_treated_as_empty():
    config = parse_service_entry("s", {"command": "c", "args": "--flag", "env": ["A"]})
    assert config.launch_args == ()
    assert dict(config.environment) == {}


def test_service_config_is_frozen():
    config = ServiceConfig(name="a", launch_command="b")
    with pytest.raises(AttributeError):
        config.name = "c"


def test_service_names_in_document_order_without_self():
    document = {"mcpServers": {
        "zeta": {"command": "z"},
        SELF_SERVICE_NAME: {"command": "codemode"},
        "alpha": {"command": "a"},
    }}
    assert service_names(document) == ["zeta", "alpha"]


def test_service_names_skip_unlaunchable_entries():
    document = {"mcpServers": {
        "no_command": {"args": ["x"]},
        "empty_command": {"command": ""},
        "not_object": "npx",
        "ok": {"command": "ok"},
    }}
    assert service_names(document) == ["ok"]


def test_services_key_is_accepted():
    document = {"services": {"alpha": {"command": "a"}}}
    assert service_names(document) == ["alpha"]
    assert find_service(document, "alpha").launch_command == "a"


@pytest.mark.parametrize("document", [
    None, [], "text", {}, {"mcpServers": []}, {"mcpServers": None},
])
def test_malformed_documents_are_empty(document):
    assert service_names(document) == []
    assert find_service(document, "anything") is None


def test_find_service_never_returns_self():
    document = {"mcpServers": {SELF_SERVICE_NAME: {"command": "codemode"}}}
    assert find_service(document, SELF_SERVICE_NAME) is None


def test_find_service_missing_name():
    assert find_service({"mcpServers": {"a": {"command": "a"}}}, "b") is None
