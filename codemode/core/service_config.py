"""Service Configuration — pure parsing of per-directory service-definition documents.

Invariants:
    - ServiceConfig is immutable once parsed
    - Entries without a string `command` are dropped, never raised, and never listed
    - The orchestrator's own entry (SELF_SERVICE_NAME) is never exposed for proxying
    - args and env values coerced to str; non-list args / non-dict env treated as empty

Design Decisions:
    - `mcpServers` is the canonical key, `services` accepted as alias: same document
      layout as the MCP client config files users already have
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from codemode.core.domain_types import ServiceName

SERVICES_DOCUMENT_NAME = ".mcp.json"
SERVICES_KEYS = ("mcpServers", "services")
SELF_SERVICE_NAME = "codemode"


@dataclass(frozen=True)
class ServiceConfig:
    """Launch definition for one downstream MCP service."""
    name: ServiceName
    launch_command: str
    launch_args: tuple[str, ...] = ()
    environment: Mapping[str, str] = field(default_factory=dict)


def _services_section(document: Any) -> Mapping[str, Any]:
    if not isinstance(document, Mapping):
        return {}
    for key in SERVICES_KEYS:
        section = document.get(key)
        if isinstance(section, Mapping):
            return section
    return {}


def parse_service_entry(name: str, raw: Any) -> ServiceConfig | None:
    """Build a ServiceConfig from one raw entry, or None if unusable."""
    if not isinstance(raw, Mapping):
        return None
    command = raw.get("command")
    if not isinstance(command, str) or not command:
        return None
    args = raw.get("args", [])
    if not isinstance(args, list):
        args = []
    env = raw.get("env", {})
    if not isinstance(env, Mapping):
        env = {}
    return ServiceConfig(
        name=ServiceName(name),
        launch_command=command,
        launch_args=tuple(str(arg) for arg in args),
        environment={str(k): str(v) for k, v in env.items()},
    )


def service_names(document: Any) -> list[ServiceName]:
    """Launchable names in a document, in document order, excluding the orchestrator."""
    return [
        ServiceName(name) for name, raw in _services_section(document).items()
        if name != SELF_SERVICE_NAME and parse_service_entry(name, raw) is not None
    ]


def find_service(document: Any, name: str) -> ServiceConfig | None:
    """Look up one service definition in a parsed document."""
    if name == SELF_SERVICE_NAME:
        return None
    section = _services_section(document)
    if name not in section:
        return None
    return parse_service_entry(name, section[name])
