# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Offline generator turning configuration classes into schema documents.

The generator reflects over dataclasses and pydantic models, maps their
annotated field types onto the node kinds understood by the registry, and
writes one ``<category>_<name>.json`` document per component into a
version directory. Field descriptions come from the comments written next
to the field declarations, so the source stays the single place where
configuration options are documented.
"""

from __future__ import annotations

import ast
import dataclasses
import datetime as dt
import enum
import importlib
import inspect
import io
import json
import logging
import shutil
import textwrap
import tokenize
import types
import typing
from collections.abc import Iterable, Mapping, MutableMapping, Sequence
from collections.abc import Set as AbstractSet
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel

from .errors import ConfigTypeImportError, SchemaRegistryError
from .models import ComponentCategory, ComponentIdentity
from .types import (
    CHANGELOG_FILENAME,
    DATE_TIME_FORMAT,
    DURATION_DESCRIPTION,
    DURATION_PATTERN,
    JSON_SCHEMA_DIALECT,
    README_SUFFIX,
)

LOGGER = logging.getLogger(__name__)

PropertySchema = dict[str, Any]

DEPRECATION_KEYWORDS: Final[tuple[str, ...]] = (
    "deprecated",
    "deprecation",
    "no longer",
    "obsolete",
    "legacy",
    "do not use",
    "will be removed",
    "use instead",
    "replaced by",
)

METADATA_NAME: Final[str] = "name"
METADATA_DESCRIPTION: Final[str] = "description"
METADATA_DEPRECATED: Final[str] = "deprecated"
METADATA_SQUASH: Final[str] = "squash"
SKIP_FIELD_NAME: Final[str] = "-"

_ARRAY_ORIGINS: Final[tuple[type, ...]] = (list, tuple, set, frozenset, Sequence, AbstractSet)
_MAPPING_ORIGINS: Final[tuple[type, ...]] = (dict, Mapping, MutableMapping)


@dataclass(frozen=True, slots=True)
class ComponentSpec:
    """Configuration class registered for one collector component."""

    category: ComponentCategory
    name: str
    config_type: type
    readme: Path | None = None


@dataclass(frozen=True, slots=True)
class _FieldInfo:
    """Normalised view over a dataclass field or pydantic model field."""

    attribute: str
    name: str
    annotation: Any
    description: str | None
    deprecated: bool
    squash: bool


@dataclass(slots=True)
class SchemaGenerator:
    """Generate JSON schema documents for component configuration classes."""

    output_dir: Path
    _comment_cache: dict[type, dict[str, str]] = field(default_factory=dict, init=False, repr=False)
    _active: list[type] = field(default_factory=list, init=False, repr=False)

    def generate_schema(self, config_type: type) -> PropertySchema:
        """Return the root schema document describing ``config_type``.

        Args:
            config_type: Dataclass or pydantic model describing the configuration.

        Returns:
            PropertySchema: Object-rooted Draft 2020-12 schema mapping.

        Raises:
            TypeError: If ``config_type`` is neither a dataclass nor a pydantic model.
        """

        if not _is_struct(config_type):
            raise TypeError(f"{config_type!r} is not a dataclass or pydantic model")
        return {
            "$schema": JSON_SCHEMA_DIALECT,
            "type": "object",
            "properties": self._struct_properties(config_type),
        }

    def generate_component(
        self,
        category: ComponentCategory | str,
        name: str,
        config_type: type,
        version: str,
        *,
        readme: Path | None = None,
    ) -> Path:
        """Write the schema (and optional readme) of one component.

        Args:
            category: Component category.
            name: Component name.
            config_type: Configuration class of the component.
            version: Collector version directory to write into.
            readme: Optional readme copied next to the schema.

        Returns:
            Path: Path of the written schema document.
        """

        identity = ComponentIdentity.create(category, name, version)
        schema = self.generate_schema(config_type)
        directory = self._version_dir(version)
        path = directory / f"{identity.entry_stem}.json"
        path.write_text(json.dumps(schema, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        LOGGER.info("generated schema for %s %s -> %s", identity.category.value, identity.name, path.name)
        if readme is not None:
            shutil.copyfile(readme, directory / f"{identity.entry_stem}{README_SUFFIX}")
        return path

    def generate_all(self, version: str, components: Iterable[ComponentSpec]) -> tuple[Path, ...]:
        """Generate every component, skipping the ones that fail.

        Args:
            version: Collector version directory to write into.
            components: Component registrations to generate.

        Returns:
            tuple[Path, ...]: Paths of the schema documents written.
        """

        written: list[Path] = []
        for spec in components:
            try:
                written.append(
                    self.generate_component(spec.category, spec.name, spec.config_type, version, readme=spec.readme),
                )
            except (SchemaRegistryError, TypeError, ValueError, OSError) as exc:
                LOGGER.warning("failed to generate schema for %s %s: %s", spec.category, spec.name, exc)
        return tuple(written)

    def write_changelog(self, version: str, text: str) -> Path:
        """Write the changelog of ``version`` and return its path."""

        path = self._version_dir(version) / CHANGELOG_FILENAME
        path.write_text(text, encoding="utf-8")
        return path

    def _version_dir(self, version: str) -> Path:
        directory = self.output_dir / version
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    # Reflection ------------------------------------------------------------

    def _struct_properties(self, struct: type) -> PropertySchema:
        properties: PropertySchema = {}
        self._active.append(struct)
        try:
            for info in _struct_fields(struct):
                if info.name == SKIP_FIELD_NAME:
                    continue
                if info.squash:
                    target = _unwrap_optional(info.annotation)
                    if _is_struct(target) and target not in self._active:
                        properties.update(self._struct_properties(target))
                    continue
                properties[info.name] = self._field_schema(struct, info)
        finally:
            self._active.pop()
        return properties

    def _field_schema(self, struct: type, info: _FieldInfo) -> PropertySchema:
        prop = self.type_schema(info.annotation)
        description = self._field_comment(struct, info.attribute) or info.description
        if description and "description" not in prop:
            prop["description"] = description
        if info.deprecated or is_deprecated_text(description):
            prop["deprecated"] = True
        return prop

    def type_schema(self, annotation: Any) -> PropertySchema:
        """Return the schema node describing ``annotation``.

        Args:
            annotation: Resolved type annotation of a configuration field.

        Returns:
            PropertySchema: Schema node for the annotation.
        """

        annotation = _unwrap_optional(annotation)
        if annotation is dt.timedelta:
            return {"type": "string", "pattern": DURATION_PATTERN, "description": DURATION_DESCRIPTION}
        if annotation is dt.datetime:
            return {"type": "string", "format": DATE_TIME_FORMAT}
        scalar = _scalar_kind(annotation)
        if scalar is not None:
            return {"type": scalar}

        origin = typing.get_origin(annotation) or annotation
        args = typing.get_args(annotation)
        if inspect.isclass(origin) and issubclass(origin, (str, bytes)):
            return {"type": "string"}
        if inspect.isclass(origin) and issubclass(origin, _MAPPING_ORIGINS):
            schema: PropertySchema = {"type": "object", "additionalProperties": True}
            if len(args) == 2 and _unwrap_optional(args[0]) is str:
                schema["additionalProperties"] = self.type_schema(args[1])
            return schema
        if inspect.isclass(origin) and issubclass(origin, _ARRAY_ORIGINS):
            item_args = [arg for arg in args if arg is not Ellipsis]
            item = self.type_schema(item_args[0]) if item_args else _permissive_object()
            return {"type": "array", "items": item}
        if _is_struct(annotation):
            if annotation in self._active:
                return {"type": "object"}
            schema = {"type": "object"}
            properties = self._struct_properties(annotation)
            if properties:
                schema["properties"] = properties
            return schema
        return _permissive_object()

    # Comments --------------------------------------------------------------

    def _field_comment(self, struct: type, attribute: str) -> str:
        for owner in inspect.getmro(struct):
            if owner is object:
                continue
            comment = self._comments_for(owner).get(attribute)
            if comment:
                return comment
        return ""

    def _comments_for(self, owner: type) -> dict[str, str]:
        cached = self._comment_cache.get(owner)
        if cached is None:
            cached = extract_field_comments(owner)
            self._comment_cache[owner] = cached
        return cached


def extract_field_comments(owner: type) -> dict[str, str]:
    """Return cleaned comments for the annotated fields declared by ``owner``.

    For each field the comment block directly above the declaration wins,
    then a trailing comment on the same line, then an attribute docstring
    directly below it.

    Args:
        owner: Class whose source should be inspected.

    Returns:
        dict[str, str]: Field attribute names mapped to their comments. Classes
        without retrievable source yield an empty mapping.
    """

    try:
        source = textwrap.dedent(inspect.getsource(owner))
    except (OSError, TypeError):
        return {}
    try:
        module = ast.parse(source)
    except SyntaxError:
        return {}
    class_node = next((node for node in module.body if isinstance(node, ast.ClassDef)), None)
    if class_node is None:
        return {}

    full_line, inline = _comment_tokens(source)
    comments: dict[str, str] = {}
    body = class_node.body
    for index, node in enumerate(body):
        if not isinstance(node, ast.AnnAssign) or not isinstance(node.target, ast.Name):
            continue
        block: list[str] = []
        line = node.lineno - 1
        while line in full_line:
            block.insert(0, full_line[line])
            line -= 1
        text = "\n".join(block) if block else inline.get(node.lineno, "")
        if not text and index + 1 < len(body):
            text = _attribute_docstring(body[index + 1])
        cleaned = clean_comment(text)
        if cleaned:
            comments[node.target.id] = cleaned
    return comments


def clean_comment(comment: str) -> str:
    """Strip comment markers and join the non-empty lines with one space."""

    cleaned: list[str] = []
    for line in comment.strip().splitlines():
        stripped = line.strip().lstrip("#").strip()
        if stripped:
            cleaned.append(stripped)
    return " ".join(cleaned)


def is_deprecated_text(description: str | None) -> bool:
    """Return ``True`` when ``description`` reads like a deprecation notice."""

    if not description:
        return False
    lowered = description.lower()
    return any(keyword in lowered for keyword in DEPRECATION_KEYWORDS)


def _comment_tokens(source: str) -> tuple[dict[int, str], dict[int, str]]:
    """Return full-line and trailing comments keyed by 1-based line number."""

    full_line: dict[int, str] = {}
    inline: dict[int, str] = {}
    try:
        for token in tokenize.generate_tokens(io.StringIO(source).readline):
            if token.type != tokenize.COMMENT:
                continue
            row, column = token.start
            if token.line[:column].strip():
                inline[row] = token.string
            else:
                full_line[row] = token.string
    except (tokenize.TokenError, SyntaxError):
        return {}, {}
    return full_line, inline


def _attribute_docstring(node: ast.stmt) -> str:
    if isinstance(node, ast.Expr) and isinstance(node.value, ast.Constant) and isinstance(node.value.value, str):
        return inspect.cleandoc(node.value.value)
    return ""


def _struct_fields(struct: type) -> list[_FieldInfo]:
    if dataclasses.is_dataclass(struct):
        hints = typing.get_type_hints(struct)
        infos: list[_FieldInfo] = []
        for item in dataclasses.fields(struct):
            metadata = item.metadata
            infos.append(
                _FieldInfo(
                    attribute=item.name,
                    name=str(metadata.get(METADATA_NAME) or item.name),
                    annotation=hints.get(item.name, Any),
                    description=_optional_text(metadata.get(METADATA_DESCRIPTION)),
                    deprecated=bool(metadata.get(METADATA_DEPRECATED)),
                    squash=bool(metadata.get(METADATA_SQUASH)),
                ),
            )
        return infos
    if issubclass(struct, BaseModel):
        return [
            _FieldInfo(
                attribute=attribute,
                name=model_field.alias or attribute,
                annotation=model_field.annotation if model_field.annotation is not None else Any,
                description=model_field.description,
                deprecated=bool(getattr(model_field, "deprecated", None)),
                squash=False,
            )
            for attribute, model_field in struct.model_fields.items()
        ]
    raise TypeError(f"{struct!r} is not a dataclass or pydantic model")


def load_config_type(target: str) -> type:
    """Import the configuration class named by ``target``.

    Args:
        target: ``package.module:ClassName`` reference.

    Returns:
        type: Dataclass or pydantic model ready for :meth:`SchemaGenerator.generate_schema`.

    Raises:
        ConfigTypeImportError: If the module cannot be imported or the
            attribute is not a dataclass or pydantic model.
    """

    module_path, _, attribute = target.partition(":")
    if not module_path or not attribute:
        raise ConfigTypeImportError(f"'{target}' is not a module:Class reference")
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise ConfigTypeImportError(f"unable to import module '{module_path}'") from exc
    candidate: Any = module
    for part in attribute.split("."):
        try:
            candidate = getattr(candidate, part)
        except AttributeError as exc:
            raise ConfigTypeImportError(f"module '{module_path}' has no attribute '{attribute}'") from exc
    if not _is_struct(candidate):
        raise ConfigTypeImportError(f"'{target}' is not a dataclass or pydantic model")
    return candidate


def _is_struct(annotation: Any) -> bool:
    if not inspect.isclass(annotation) or typing.get_origin(annotation) is not None:
        return False
    return dataclasses.is_dataclass(annotation) or issubclass(annotation, BaseModel)


def _scalar_kind(annotation: Any) -> str | None:
    if not inspect.isclass(annotation) or typing.get_origin(annotation) is not None:
        return None
    if issubclass(annotation, bool):
        return "boolean"
    if issubclass(annotation, enum.Enum):
        return "string"
    if issubclass(annotation, int):
        return "integer"
    if issubclass(annotation, float):
        return "number"
    if issubclass(annotation, str):
        return "string"
    return None


def _unwrap_optional(annotation: Any) -> Any:
    """Strip ``Annotated`` wrappers and ``None`` members of unions."""

    while typing.get_origin(annotation) is typing.Annotated:
        annotation = typing.get_args(annotation)[0]
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return _unwrap_optional(members[0])
        return Any
    return annotation


def _permissive_object() -> PropertySchema:
    return {"type": "object", "additionalProperties": True}


def _optional_text(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


__all__ = [
    "ComponentSpec",
    "DEPRECATION_KEYWORDS",
    "SchemaGenerator",
    "clean_comment",
    "extract_field_comments",
    "is_deprecated_text",
    "load_config_type",
]
