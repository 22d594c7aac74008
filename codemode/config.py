"""Application Configuration — layered settings via pydantic-settings.

Invariants:
    - Priority (highest first): init kwargs > environment > .env > settings document
    - The settings document (codemode-config.json) is optional: missing or malformed
      content logs a warning and built-in defaults apply, never raises
    - get_settings() is cached (lru_cache): single instance per process
    - Document keys are camelCase (proxyPort, configDirectories); env vars are snake_case

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Custom settings source for the document: fallible read, same as service documents
"""

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = logging.getLogger(__name__)

SETTINGS_DOCUMENT_ENV = "CODEMODE_CONFIG_FILE"
DEFAULT_SETTINGS_DOCUMENT = "codemode-config.json"


def settings_document_path() -> Path:
    return Path(os.environ.get(SETTINGS_DOCUMENT_ENV, DEFAULT_SETTINGS_DOCUMENT))


def read_settings_document(path: Path) -> dict[str, Any] | None:
    """Read the process-wide settings document. None when absent or unreadable."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        logger.warning(f"Could not load {path}, using defaults")
        return None
    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning(f"Malformed settings document {path}: {e}, using defaults")
        return None
    if not isinstance(document, dict):
        logger.warning(f"Settings document {path} is not an object, using defaults")
        return None
    return document


class SettingsDocumentSource(PydanticBaseSettingsSource):
    """Feeds codemode-config.json into Settings at the lowest priority."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path):
        super().__init__(settings_cls)
        self._document = read_settings_document(path) or {}

    def get_field_value(
        self, field: FieldInfo, field_name: str,
    ) -> tuple[Any, str, bool]:
        return self._document.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._document)


class Settings(BaseSettings):
    """Application settings from environment variables and the settings document."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
        populate_by_name=True,
    )

    # Proxy
    proxy_port: int = Field(
        3001, ge=1, le=65535,
        validation_alias=AliasChoices("proxy_port", "proxyPort"),
    )
    proxy_host: str = Field(
        "127.0.0.1", validation_alias=AliasChoices("proxy_host", "proxyHost"),
    )
    config_directories: list[str] = Field(
        default_factory=lambda: ["./"],
        validation_alias=AliasChoices("config_directories", "configDirectories"),
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("cors_origins", "corsOrigins"),
    )

    # Downstream services
    service_request_timeout_seconds: float = Field(
        60.0, gt=0,
        validation_alias=AliasChoices(
            "service_request_timeout_seconds", "serviceRequestTimeoutSeconds",
        ),
    )

    # Sandbox
    runtime_command: str = Field(
        "deno", validation_alias=AliasChoices("runtime_command", "runtimeCommand"),
    )
    execution_timeout_ms: int = Field(
        30_000, gt=0,
        validation_alias=AliasChoices("execution_timeout_ms", "executionTimeoutMs"),
    )

    # Observability
    log_level: str = Field(
        "INFO", validation_alias=AliasChoices("log_level", "logLevel"),
    )
    log_format: str = Field(
        "json", validation_alias=AliasChoices("log_format", "logFormat"),
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            SettingsDocumentSource(settings_cls, settings_document_path()),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
