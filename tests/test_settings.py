# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for registry settings resolution."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from collector_schema.settings import (
    SCAN_ARRAY_ITEMS_ENV_VAR,
    SCHEMA_FORMAT_ENV_VAR,
    SCHEMA_ROOT_ENV_VAR,
    ConfigError,
    RegistrySettings,
    resolve_settings,
)
from collector_schema.store import DEFAULT_SCHEMA_ROOT


def test_defaults_without_environment() -> None:
    settings = resolve_settings(env={})

    assert settings == RegistrySettings()
    assert settings.resolved_root == DEFAULT_SCHEMA_ROOT
    assert settings.schema_format == "json"
    assert settings.scan_array_items is False


def test_environment_overrides(tmp_path: Path) -> None:
    settings = resolve_settings(
        env={
            SCHEMA_ROOT_ENV_VAR: str(tmp_path),
            SCHEMA_FORMAT_ENV_VAR: "YAML",
            SCAN_ARRAY_ITEMS_ENV_VAR: "yes",
        },
    )

    assert settings.resolved_root == tmp_path
    assert settings.schema_format == "yaml"
    assert settings.scan_array_items is True


def test_explicit_settings_take_precedence(tmp_path: Path) -> None:
    explicit = RegistrySettings(schema_root=tmp_path)

    assert resolve_settings(explicit, env={SCHEMA_ROOT_ENV_VAR: "/elsewhere"}) is explicit


def test_os_environment_is_consulted(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(SCHEMA_ROOT_ENV_VAR, str(tmp_path))
    monkeypatch.delenv(SCHEMA_FORMAT_ENV_VAR, raising=False)
    monkeypatch.delenv(SCAN_ARRAY_ITEMS_ENV_VAR, raising=False)

    assert resolve_settings().schema_root == tmp_path


@pytest.mark.parametrize(
    "env",
    [
        {SCHEMA_FORMAT_ENV_VAR: "toml"},
        {SCAN_ARRAY_ITEMS_ENV_VAR: "sometimes"},
    ],
)
def test_invalid_environment_values(env: dict[str, str]) -> None:
    with pytest.raises(ConfigError):
        resolve_settings(env=env)


def test_settings_reject_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        RegistrySettings(schema_dir="/tmp")  # type: ignore[call-arg]
