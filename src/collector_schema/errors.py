# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by schema registry operations."""

from __future__ import annotations


class SchemaRegistryError(RuntimeError):
    """Base class for every error surfaced by the schema registry."""


class NotFoundError(SchemaRegistryError):
    """Raised when a requested asset does not exist in the schema store."""


class ComponentNotFoundError(NotFoundError):
    """Raised when no schema document exists for a component identity."""

    def __init__(self, category: str, name: str) -> None:
        """Create the error for the missing ``category``/``name`` pair.

        Args:
            category: Component category of the failed lookup.
            name: Component name of the failed lookup.
        """

        super().__init__(f"schema not found for component {category} {name}")
        self.category = category
        self.name = name


class ReadmeNotFoundError(NotFoundError):
    """Raised when a component has no readme for the requested version."""

    def __init__(self, category: str, name: str, version: str) -> None:
        super().__init__(f"README not found for component {category} {name} v{version}")
        self.category = category
        self.name = name
        self.version = version


class ChangelogNotFoundError(NotFoundError):
    """Raised when a version directory carries no changelog."""

    def __init__(self, version: str) -> None:
        super().__init__(f"changelog not found for version {version}")
        self.version = version


class VersionNotFoundError(NotFoundError):
    """Raised when the store has no directory for a version."""

    def __init__(self, version: str) -> None:
        super().__init__(f"no schemas found for version {version}")
        self.version = version


class InvalidIdentityError(SchemaRegistryError, ValueError):
    """Raised when a category, name, or version cannot address a schema."""


class InvalidCategoryError(InvalidIdentityError):
    """Raised when a category string is outside the closed category set."""

    def __init__(self, value: str) -> None:
        super().__init__(f"invalid component type: {value}")
        self.value = value


class InvalidQueryError(SchemaRegistryError, ValueError):
    """Raised when a documentation search query cannot be run."""


class ConfigTypeImportError(SchemaRegistryError, ValueError):
    """Raised when a generator target does not resolve to a configuration class."""


class ConfigParseError(SchemaRegistryError):
    """Raised when candidate configuration bytes are not well-formed."""


class DirectoryReadError(SchemaRegistryError):
    """Raised when the schema asset tree is missing or unreadable."""


class SchemaIntegrityError(DirectoryReadError):
    """Raised when a stored schema document is corrupted."""


__all__ = (
    "ChangelogNotFoundError",
    "ComponentNotFoundError",
    "ConfigParseError",
    "ConfigTypeImportError",
    "DirectoryReadError",
    "InvalidCategoryError",
    "InvalidIdentityError",
    "InvalidQueryError",
    "NotFoundError",
    "ReadmeNotFoundError",
    "SchemaIntegrityError",
    "SchemaRegistryError",
    "VersionNotFoundError",
)
