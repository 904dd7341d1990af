# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Versioned registry of OpenTelemetry collector component configuration schemas."""

from __future__ import annotations

from importlib import metadata

from .cache import CacheInfo
from .errors import (
    ChangelogNotFoundError,
    ComponentNotFoundError,
    ConfigParseError,
    ConfigTypeImportError,
    DirectoryReadError,
    InvalidCategoryError,
    InvalidIdentityError,
    InvalidQueryError,
    NotFoundError,
    ReadmeNotFoundError,
    SchemaIntegrityError,
    SchemaRegistryError,
    VersionNotFoundError,
)
from .generator import ComponentSpec, SchemaGenerator, load_config_type
from .manager import SchemaManager
from .models import (
    ComponentCategory,
    ComponentIdentity,
    ComponentSchema,
    DeprecatedField,
    SchemaKind,
    SchemaNode,
    ValidationIssue,
    ValidationResult,
)
from .search import DocumentSearchResult, DocumentationIndex
from .settings import ConfigError, RegistrySettings, resolve_settings
from .store import DEFAULT_SCHEMA_ROOT, SchemaStore

try:
    __version__ = metadata.version("collector-schema-registry")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

__all__ = [
    "CacheInfo",
    "ChangelogNotFoundError",
    "ComponentCategory",
    "ComponentIdentity",
    "ComponentNotFoundError",
    "ComponentSchema",
    "ComponentSpec",
    "ConfigError",
    "ConfigParseError",
    "ConfigTypeImportError",
    "DEFAULT_SCHEMA_ROOT",
    "DeprecatedField",
    "DirectoryReadError",
    "DocumentSearchResult",
    "DocumentationIndex",
    "InvalidCategoryError",
    "InvalidIdentityError",
    "InvalidQueryError",
    "NotFoundError",
    "ReadmeNotFoundError",
    "RegistrySettings",
    "SchemaGenerator",
    "SchemaIntegrityError",
    "SchemaKind",
    "SchemaManager",
    "SchemaNode",
    "SchemaRegistryError",
    "SchemaStore",
    "ValidationIssue",
    "ValidationResult",
    "VersionNotFoundError",
    "__version__",
    "load_config_type",
    "resolve_settings",
]
