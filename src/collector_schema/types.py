# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for the component schema registry."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, Literal, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

SchemaFormat: TypeAlias = Literal["json", "yaml"]

JSON_FORMAT: Final[SchemaFormat] = "json"
YAML_FORMAT: Final[SchemaFormat] = "yaml"

CHANGELOG_FILENAME: Final[str] = "changelog.md"
README_SUFFIX: Final[str] = ".md"
ENTRY_DELIMITER: Final[str] = "_"

JSON_SCHEMA_DIALECT: Final[str] = "https://json-schema.org/draft/2020-12/schema"
DURATION_PATTERN: Final[str] = "^[0-9]+(ns|us|µs|ms|s|m|h)$"
DURATION_DESCRIPTION: Final[str] = "Duration string (e.g., '1s', '5m', '1h')"
DATE_TIME_FORMAT: Final[str] = "date-time"

__all__ = [
    "CHANGELOG_FILENAME",
    "DATE_TIME_FORMAT",
    "DURATION_DESCRIPTION",
    "DURATION_PATTERN",
    "ENTRY_DELIMITER",
    "JSON_FORMAT",
    "JSON_SCHEMA_DIALECT",
    "README_SUFFIX",
    "YAML_FORMAT",
    "JSONPrimitive",
    "JSONValue",
    "SchemaFormat",
]
