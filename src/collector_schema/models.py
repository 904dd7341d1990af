# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data model for versioned component configuration schemas."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Final

from .errors import InvalidCategoryError, InvalidIdentityError, SchemaIntegrityError
from .io import encode_canonical_json
from .types import ENTRY_DELIMITER, JSONValue
from .utils import freeze_schema_mapping, is_true, lenient_mapping, lenient_string, require_schema_object

VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d+\.\d+\.\d+$")
_FORBIDDEN_NAME_CHARACTERS: Final[tuple[str, ...]] = ("/", "\\")


class ComponentCategory(str, Enum):
    """Enumerate the closed set of collector component categories."""

    RECEIVER = "receiver"
    PROCESSOR = "processor"
    EXPORTER = "exporter"
    EXTENSION = "extension"
    CONNECTOR = "connector"

    @classmethod
    def parse(cls, raw: ComponentCategory | str) -> ComponentCategory:
        """Return the category matching ``raw``.

        Args:
            raw: Category member or its lower-case string value.

        Returns:
            ComponentCategory: Matching category member.

        Raises:
            InvalidCategoryError: If ``raw`` is not one of the five categories.
        """

        if isinstance(raw, cls):
            return raw
        try:
            return cls(raw)
        except ValueError as exc:
            raise InvalidCategoryError(str(raw)) from exc

    def __str__(self) -> str:
        return self.value


class SchemaKind(str, Enum):
    """Enumerate node kinds understood by the registry."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ComponentIdentity:
    """Identify exactly one schema document by category, name, and version."""

    category: ComponentCategory
    name: str
    version: str

    @classmethod
    def create(cls, category: ComponentCategory | str, name: str, version: str) -> ComponentIdentity:
        """Build a validated identity.

        Args:
            category: Component category member or string value.
            name: Component name such as ``otlp``.
            version: Collector release in ``MAJOR.MINOR.PATCH`` form.

        Returns:
            ComponentIdentity: Identity safe to use for store lookups.

        Raises:
            InvalidCategoryError: If ``category`` is outside the closed set.
            InvalidIdentityError: If ``name`` or ``version`` is malformed.
        """

        parsed = ComponentCategory.parse(category)
        if not name or name in {".", ".."} or any(char in name for char in _FORBIDDEN_NAME_CHARACTERS):
            raise InvalidIdentityError(f"invalid component name: {name!r}")
        if not VERSION_PATTERN.match(version):
            raise InvalidIdentityError(f"invalid collector version: {version!r}")
        return cls(category=parsed, name=name, version=version)

    @property
    def cache_key(self) -> str:
        """Return the composite ``category_name_version`` key."""

        return ENTRY_DELIMITER.join((self.category.value, self.name, self.version))

    @property
    def entry_stem(self) -> str:
        """Return the ``category_name`` file stem used by the store."""

        return f"{self.category.value}{ENTRY_DELIMITER}{self.name}"

    def __str__(self) -> str:
        return f"{self.category.value}/{self.name}@{self.version}"


@dataclass(frozen=True, slots=True)
class SchemaNode:
    """Typed node of a component configuration schema document.

    ``raw`` keeps the read-only source mapping so the exact document can be
    handed to the JSON Schema validator and re-encoded without loss.
    """

    kind: SchemaKind
    properties: Mapping[str, SchemaNode] = field(default_factory=lambda: MappingProxyType({}))
    items: SchemaNode | None = None
    description: str | None = None
    deprecated: bool = False
    pattern: str | None = None
    format: str | None = None
    additional_properties: bool | SchemaNode | None = None
    raw: Mapping[str, JSONValue] = field(default_factory=lambda: MappingProxyType({}), repr=False, compare=False)

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str) -> SchemaNode:
        """Decode a schema node from its JSON mapping.

        Missing or unsupported ``type`` values degrade to a permissive object.

        Args:
            data: Mapping describing the node.
            context: Human-readable context used in error messages.

        Returns:
            SchemaNode: Decoded node tree.

        Raises:
            SchemaIntegrityError: If ``data`` contains non-JSON values.
        """

        raw = freeze_schema_mapping(data, context=context)
        return SchemaNode._decode(raw)

    @staticmethod
    def _decode(raw: Mapping[str, JSONValue]) -> SchemaNode:
        kind, degraded = _decode_kind(raw.get("type"))
        properties: dict[str, SchemaNode] = {}
        items: SchemaNode | None = None
        if kind is SchemaKind.OBJECT:
            declared = lenient_mapping(raw.get("properties")) or {}
            for name, child in declared.items():
                child_mapping = lenient_mapping(child)
                if child_mapping is not None:
                    properties[name] = SchemaNode._decode(child_mapping)
        elif kind is SchemaKind.ARRAY:
            item_mapping = lenient_mapping(raw.get("items"))
            if item_mapping is not None:
                items = SchemaNode._decode(item_mapping)
        return SchemaNode(
            kind=kind,
            properties=MappingProxyType(properties),
            items=items,
            description=lenient_string(raw.get("description")),
            deprecated=is_true(raw.get("deprecated")),
            pattern=lenient_string(raw.get("pattern")),
            format=lenient_string(raw.get("format")),
            additional_properties=True if degraded else _decode_additional(raw.get("additionalProperties")),
            raw=raw,
        )

    @property
    def is_object(self) -> bool:
        """Return ``True`` when the node describes a mapping."""

        return self.kind is SchemaKind.OBJECT

    @property
    def is_array(self) -> bool:
        """Return ``True`` when the node describes a sequence."""

        return self.kind is SchemaKind.ARRAY

    def child(self, name: str) -> SchemaNode | None:
        """Return the declared property ``name`` when present."""

        return self.properties.get(name)

    def to_mapping(self) -> Mapping[str, JSONValue]:
        """Return the read-only source mapping of the node."""

        return self.raw


def _decode_kind(value: JSONValue | None) -> tuple[SchemaKind, bool]:
    """Return the node kind and whether it was degraded to ``object``."""

    if isinstance(value, str):
        try:
            return SchemaKind(value), False
        except ValueError:
            pass
    return SchemaKind.OBJECT, True


def _decode_additional(value: JSONValue | None) -> bool | SchemaNode | None:
    if isinstance(value, bool):
        return value
    mapping = lenient_mapping(value)
    if mapping is not None:
        return SchemaNode._decode(mapping)
    return None


@dataclass(frozen=True, slots=True)
class ComponentSchema:
    """Schema document paired with the identity it was loaded for."""

    identity: ComponentIdentity
    document: SchemaNode

    @staticmethod
    def from_document(identity: ComponentIdentity, document: JSONValue) -> ComponentSchema:
        """Build a component schema from a decoded schema document.

        Args:
            identity: Identity the document was loaded for.
            document: Decoded JSON value of the schema file.

        Returns:
            ComponentSchema: Immutable schema wrapper.

        Raises:
            SchemaIntegrityError: If the document is not an object-rooted mapping.
        """

        context = f"schema {identity}"
        mapping = require_schema_object(document, context=context)
        node = SchemaNode.from_mapping(mapping, context=context)
        if "type" in mapping and mapping["type"] != SchemaKind.OBJECT.value:
            raise SchemaIntegrityError(f"{context}: root node must be of type 'object'")
        return ComponentSchema(identity=identity, document=node)

    @property
    def category(self) -> ComponentCategory:
        return self.identity.category

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def version(self) -> str:
        return self.identity.version

    def to_json(self) -> bytes:
        """Return the schema document encoded as canonical, indented JSON."""

        return encode_canonical_json(self.document.to_mapping(), indent=2)


@dataclass(frozen=True, slots=True)
class DeprecatedField:
    """Deprecated configuration field located by a dotted path."""

    path: str
    description: str
    declared_type: str


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Single structural mismatch reported by the validator.

    Attributes:
        pointer: RFC 6901 JSON pointer to the offending value (``""`` for the root).
        field: Dotted path rendering of ``pointer`` (``(root)`` for the root).
        message: Human-readable description of the mismatch.
        keyword: Schema keyword that failed, e.g. ``type`` or ``pattern``.
    """

    pointer: str
    field: str
    message: str
    keyword: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating one configuration document."""

    valid: bool
    errors: tuple[ValidationIssue, ...] = ()

    @classmethod
    def from_issues(cls, issues: tuple[ValidationIssue, ...]) -> ValidationResult:
        """Return a result that is valid exactly when ``issues`` is empty."""

        return cls(valid=not issues, errors=issues)

    def error_messages(self) -> tuple[str, ...]:
        """Return the rendered ``field: message`` strings for every issue."""

        return tuple(str(issue) for issue in self.errors)

    def __bool__(self) -> bool:
        return self.valid


__all__ = [
    "ComponentCategory",
    "ComponentIdentity",
    "ComponentSchema",
    "DeprecatedField",
    "SchemaKind",
    "SchemaNode",
    "ValidationIssue",
    "ValidationResult",
    "VERSION_PATTERN",
]
