# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration for locating and reading the schema asset tree."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .store import DEFAULT_SCHEMA_ROOT
from .types import JSON_FORMAT, YAML_FORMAT, SchemaFormat

SCHEMA_ROOT_ENV_VAR: Final[str] = "COLLECTOR_SCHEMA_ROOT"
SCHEMA_FORMAT_ENV_VAR: Final[str] = "COLLECTOR_SCHEMA_FORMAT"
SCAN_ARRAY_ITEMS_ENV_VAR: Final[str] = "COLLECTOR_SCHEMA_SCAN_ARRAY_ITEMS"

_TRUE_TOKENS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_TOKENS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})
_FORMATS: Final[tuple[SchemaFormat, ...]] = (JSON_FORMAT, YAML_FORMAT)


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class RegistrySettings(BaseModel):
    """Settings describing where schemas live and how they are scanned.

    Attributes:
        schema_root: Asset tree root; ``None`` selects the packaged schemas.
        schema_format: Serialization of schema documents in the tree.
        scan_array_items: Whether deprecation scans descend into array items.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    schema_root: Path | None = None
    schema_format: SchemaFormat = JSON_FORMAT
    scan_array_items: bool = Field(default=False)

    @property
    def resolved_root(self) -> Path:
        """Return the asset root, falling back to the packaged schemas."""

        if self.schema_root is None:
            return DEFAULT_SCHEMA_ROOT
        return self.schema_root.expanduser()


def _parse_bool(raw: str, *, variable: str) -> bool:
    token = raw.strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    raise ConfigError(f"{variable} must be a boolean flag, got {raw!r}")


def _settings_from_environment(env: Mapping[str, str]) -> RegistrySettings | None:
    """Parse registry settings from ``env`` when overrides are configured.

    Args:
        env: Environment mapping consulted for overrides.

    Returns:
        RegistrySettings | None: Settings parsed from the environment when any
        variable is present; otherwise ``None`` to indicate defaults apply.

    Raises:
        ConfigError: If a variable holds an unsupported value.
    """

    root = env.get(SCHEMA_ROOT_ENV_VAR, "").strip()
    schema_format = env.get(SCHEMA_FORMAT_ENV_VAR, "").strip().lower()
    scan_items = env.get(SCAN_ARRAY_ITEMS_ENV_VAR, "").strip()
    if not (root or schema_format or scan_items):
        return None

    if schema_format and schema_format not in _FORMATS:
        raise ConfigError(f"Unsupported schema format specified via {SCHEMA_FORMAT_ENV_VAR}: {schema_format!r}")
    return RegistrySettings(
        schema_root=Path(root).expanduser() if root else None,
        schema_format=schema_format or JSON_FORMAT,
        scan_array_items=_parse_bool(scan_items, variable=SCAN_ARRAY_ITEMS_ENV_VAR) if scan_items else False,
    )


def resolve_settings(
    settings: RegistrySettings | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> RegistrySettings:
    """Return registry settings honouring overrides and defaults.

    Args:
        settings: Explicit settings that take precedence when provided.
        env: Optional environment mapping used instead of :data:`os.environ`.

    Returns:
        RegistrySettings: Effective settings.
    """

    if settings is not None:
        return settings

    environment = os.environ if env is None else env
    env_settings = _settings_from_environment(environment)
    if env_settings is not None:
        return env_settings

    return RegistrySettings()


__all__ = [
    "ConfigError",
    "RegistrySettings",
    "SCAN_ARRAY_ITEMS_ENV_VAR",
    "SCHEMA_FORMAT_ENV_VAR",
    "SCHEMA_ROOT_ENV_VAR",
    "resolve_settings",
]
