# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Utility helpers for reading and normalising raw schema JSON structures."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from .errors import SchemaIntegrityError
from .types import JSONValue


def require_schema_object(document: JSONValue | None, *, context: str) -> Mapping[str, JSONValue]:
    """Return a decoded schema document that is a JSON object.

    A schema file whose top level is an array, a scalar or ``null`` cannot
    describe a component configuration, so it is reported as corrupted.

    Args:
        document: Decoded top-level value of a schema file.
        context: Component identity prefixed to the error message.

    Raises:
        SchemaIntegrityError: If ``document`` is not a JSON object.
    """
    if isinstance(document, Mapping):
        return document
    kind = "null" if document is None else type(document).__name__
    raise SchemaIntegrityError(f"{context}: schema document must be a JSON object, got {kind}")


def lenient_string(value: JSONValue | None) -> str | None:
    """Return ``value`` when it is a string, otherwise ``None``.

    Schema annotations such as ``description`` are informational, so a
    mistyped annotation is ignored rather than rejected.
    """
    return value if isinstance(value, str) else None


def lenient_mapping(value: JSONValue | None) -> Mapping[str, JSONValue] | None:
    """Return ``value`` when it is a mapping, otherwise ``None``."""
    return value if isinstance(value, Mapping) else None


def is_true(value: JSONValue | None) -> bool:
    """Return ``True`` only for the JSON boolean ``true``."""
    return isinstance(value, bool) and value


def freeze_schema_mapping(node: Mapping[str, JSONValue], *, context: str) -> Mapping[str, JSONValue]:
    """Snapshot a schema node so cached schemas cannot be mutated by callers.

    Nested objects become read-only mapping proxies and arrays become
    tuples. ``context`` grows with each property name so that an error
    points at the offending node, e.g. ``schema receiver otlp v1.0.0.properties``.

    Raises:
        SchemaIntegrityError: If a key is not a string or a value has no
            JSON counterpart.
    """
    snapshot: dict[str, JSONValue] = {}
    for key, member in node.items():
        if not isinstance(key, str):
            raise SchemaIntegrityError(f"{context}: schema key {key!r} is not a string")
        snapshot[key] = freeze_schema_value(member, context=f"{context}.{key}")
    return MappingProxyType(snapshot)


def freeze_schema_value(value: JSONValue, *, context: str) -> JSONValue:
    """Snapshot any value found inside a schema document."""
    if isinstance(value, Mapping):
        return freeze_schema_mapping(value, context=context)
    if isinstance(value, (list, tuple)):
        return tuple(freeze_schema_value(member, context=f"{context}[]") for member in value)
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    raise SchemaIntegrityError(f"{context}: {type(value).__name__} is not a JSON value")


def thaw_json_value(value: JSONValue) -> JSONValue:
    """Return a plain JSON-compatible representation of ``value``.

    Args:
        value: Frozen JSON value that may contain mapping proxies or tuples.

    Returns:
        JSONValue: JSON-compatible value composed of built-in ``dict`` and
        ``list`` containers.
    """

    if isinstance(value, Mapping):
        return {str(key): thaw_json_value(item) for key, item in value.items()}
    if isinstance(value, (tuple, list)):
        return [thaw_json_value(item) for item in value]
    return value


__all__ = [
    "freeze_schema_mapping",
    "freeze_schema_value",
    "is_true",
    "lenient_mapping",
    "lenient_string",
    "require_schema_object",
    "thaw_json_value",
]
