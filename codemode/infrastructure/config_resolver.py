"""Config Resolver — locates service definitions across ordered configuration directories.

Invariants:
    - Directories scanned in the order given; first directory defining a name wins
    - list_all() is the union of names across readable documents, each name once
    - Missing, unreadable, or malformed documents contribute nothing (never raise)
    - Not-found is None, not an error
    - Documents re-read on every call: no cache, nothing persisted

Design Decisions:
    - read_services_document returns None instead of raising: the scan loops stay
      free of exception-driven control flow
    - Paths normalized once at construction: "~/" expands against the home directory,
      everything else resolves to absolute form
"""

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from codemode.core.domain_types import ServiceName
from codemode.core.service_config import (
    SERVICES_DOCUMENT_NAME,
    ServiceConfig,
    find_service,
    service_names,
)

logger = logging.getLogger(__name__)


def expand_directory(path: str) -> Path:
    """Expand a leading tilde; resolve everything else to an absolute path."""
    if path == "~" or path.startswith("~/"):
        return Path(path).expanduser()
    return Path(path).resolve()


def read_services_document(directory: Path) -> Any | None:
    """Parsed service-definition document from one directory, or None."""
    document_path = directory / SERVICES_DOCUMENT_NAME
    try:
        content = document_path.read_bytes()
    except OSError:
        return None
    # Undecodable bytes surface as UnicodeDecodeError, a ValueError like JSONDecodeError
    try:
        return json.loads(content)
    except ValueError as e:
        logger.debug(f"Skipping malformed {document_path}: {e}")
        return None


class ConfigResolver:
    """Resolves service names against layered configuration directories."""

    def __init__(self, directories: Sequence[str]):
        self._directories = [expand_directory(d) for d in directories]

    @property
    def directories(self) -> list[Path]:
        return list(self._directories)

    def _documents(self):
        for directory in self._directories:
            document = read_services_document(directory)
            if document is not None:
                yield directory, document

    def find(self, name: str) -> ServiceConfig | None:
        """First ServiceConfig for name in directory order, or None."""
        for directory, document in self._documents():
            config = find_service(document, name)
            if config is not None:
                logger.debug(
                    f"Resolved service '{name}' from {directory}",
                    extra={"service_name": name},
                )
                return config
        return None

    def list_all(self) -> list[ServiceName]:
        """Union of service names across every readable document."""
        names: dict[ServiceName, None] = {}
        for _, document in self._documents():
            for name in service_names(document):
                names.setdefault(name, None)
        return list(names)
