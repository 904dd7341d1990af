# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Locate deprecated fields inside a schema document."""

from __future__ import annotations

from dataclasses import dataclass

from .models import DeprecatedField, SchemaNode

ARRAY_ITEM_SUFFIX = "[]"


@dataclass(frozen=True, slots=True)
class DeprecationScanner:
    """Depth-first walk over object ``properties`` collecting deprecated fields.

    By default array ``items`` are not entered. With ``include_array_items``
    the walk also descends into object-typed array elements, naming their
    fields ``parent[].child``.
    """

    include_array_items: bool = False

    def scan(self, document: SchemaNode) -> tuple[DeprecatedField, ...]:
        """Return every deprecated field of ``document`` in document order.

        Args:
            document: Root node of a component schema.

        Returns:
            tuple[DeprecatedField, ...]: Deprecated fields with dotted paths.
        """

        found: list[DeprecatedField] = []
        self._walk(document, "", found)
        return tuple(found)

    def _walk(self, node: SchemaNode, parent_path: str, found: list[DeprecatedField]) -> None:
        for field_name, child in node.properties.items():
            current_path = f"{parent_path}.{field_name}" if parent_path else field_name
            if child.deprecated:
                found.append(
                    DeprecatedField(
                        path=current_path,
                        description=child.description or "",
                        declared_type=child.kind.value,
                    ),
                )
            if child.is_object:
                self._walk(child, current_path, found)
            elif self.include_array_items and child.is_array and child.items is not None:
                self._walk_items(child.items, current_path + ARRAY_ITEM_SUFFIX, found)

    def _walk_items(self, items: SchemaNode, path: str, found: list[DeprecatedField]) -> None:
        if items.is_object:
            self._walk(items, path, found)
        elif items.is_array and items.items is not None:
            self._walk_items(items.items, path + ARRAY_ITEM_SUFFIX, found)


def find_deprecated_fields(document: SchemaNode, *, include_array_items: bool = False) -> tuple[DeprecatedField, ...]:
    """Return deprecated fields of ``document`` using a default scanner."""

    return DeprecationScanner(include_array_items=include_array_items).scan(document)


__all__ = ["DeprecationScanner", "find_deprecated_fields"]
