# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Decoding and encoding helpers for schema documents and configurations."""

from __future__ import annotations

import datetime as dt
import json
from collections.abc import Mapping
from typing import cast

import yaml
from yaml.constructor import ConstructorError

from .errors import ConfigParseError, SchemaIntegrityError
from .types import JSON_FORMAT, YAML_FORMAT, JSONValue, SchemaFormat
from .utils import thaw_json_value


def decode_schema_bytes(data: bytes, *, schema_format: SchemaFormat, context: str) -> JSONValue:
    """Decode raw schema bytes read from the store.

    Args:
        data: Serialized schema document.
        schema_format: Serialization format fixed for the asset tree.
        context: Human-readable context string used in error messages.

    Returns:
        JSONValue: Decoded schema document.

    Raises:
        SchemaIntegrityError: If the document cannot be parsed.
    """

    try:
        if schema_format == JSON_FORMAT:
            return cast(JSONValue, json.loads(data))
        if schema_format == YAML_FORMAT:
            return _ensure_json_value(_load_yaml(data), context=context, error=SchemaIntegrityError)
    except (json.JSONDecodeError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise SchemaIntegrityError(f"{context}: failed to parse schema {schema_format}") from exc
    raise ValueError(f"unsupported schema format '{schema_format}'")


def decode_json_config(data: bytes | str) -> JSONValue:
    """Parse candidate configuration JSON.

    Args:
        data: JSON text or UTF-8 bytes.

    Returns:
        JSONValue: Parsed configuration value.

    Raises:
        ConfigParseError: If ``data`` is not well-formed JSON.
    """

    try:
        return cast(JSONValue, json.loads(data))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigParseError(f"failed to parse JSON data: {exc}") from exc


def decode_yaml_config(data: bytes | str) -> JSONValue:
    """Parse candidate configuration YAML into the JSON value model.

    Mapping keys are stringified the way JSON would render them while the
    document is read, so ``1`` and ``true`` stay distinct keys. Timestamps
    become ISO 8601 strings.

    Args:
        data: YAML text or UTF-8 bytes.

    Returns:
        JSONValue: Parsed configuration value restricted to JSON types.

    Raises:
        ConfigParseError: If ``data`` is not well-formed YAML or holds
            values with no JSON representation.
    """

    try:
        payload = _load_yaml(data)
    except yaml.YAMLError as exc:
        raise ConfigParseError(f"failed to parse YAML data: {exc}") from exc
    return _ensure_json_value(payload, context="<yaml>", error=ConfigParseError)


def encode_canonical_json(value: JSONValue, *, indent: int | None = None) -> bytes:
    """Return ``value`` serialized as canonical UTF-8 JSON with sorted keys."""

    separators = (",", ": ") if indent is not None else (",", ":")
    return json.dumps(
        thaw_json_value(value),
        indent=indent,
        sort_keys=True,
        ensure_ascii=False,
        separators=separators,
    ).encode("utf-8")


class _JSONKeyLoader(yaml.SafeLoader):
    """Safe loader that stores every mapping key as its JSON string form."""

    def construct_mapping(self, node: yaml.Node, deep: bool = False) -> dict[str, object]:
        if not isinstance(node, yaml.MappingNode):
            raise ConstructorError(None, None, f"expected a mapping node, but found {node.id}", node.start_mark)
        self.flatten_mapping(node)
        mapping: dict[str, object] = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=True)
            json_key = _json_key(key)
            if json_key is None:
                raise ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found key {key!r} with no JSON representation",
                    key_node.start_mark,
                )
            mapping[json_key] = self.construct_object(value_node, deep=deep)
        return mapping


def _load_yaml(data: bytes | str) -> object:
    return yaml.load(data, Loader=_JSONKeyLoader)  # noqa: S506 - subclass of SafeLoader


def _json_key(key: object) -> str | None:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, (str, int, float)):
        return str(key)
    if isinstance(key, (dt.datetime, dt.date)):
        return key.isoformat()
    return None


def _ensure_json_value(value: object, *, context: str, error: type[Exception]) -> JSONValue:
    """Ensure ``value`` is composed of JSON-compatible structures.

    Args:
        value: Parsed YAML payload to normalise recursively.
        context: Human-readable context string used in error messages.
        error: Exception type raised on unsupported constructs.

    Returns:
        JSONValue: Normalised JSON value.
    """

    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        normalised: dict[str, JSONValue] = {}
        for key, item in value.items():
            json_key = _json_key(key)
            if json_key is None:
                raise error(f"{context}: mapping key {key!r} cannot be represented in JSON")
            normalised[json_key] = _ensure_json_value(item, context=f"{context}.{json_key}", error=error)
        return normalised
    if isinstance(value, (list, tuple, set)):
        return [_ensure_json_value(item, context=f"{context}[]", error=error) for item in value]
    raise error(f"{context}: value of type {type(value).__name__} is not valid JSON")


__all__ = [
    "decode_json_config",
    "decode_schema_bytes",
    "decode_yaml_config",
    "encode_canonical_json",
]
