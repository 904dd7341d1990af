# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem scanning utilities for the versioned schema asset tree."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import DirectoryReadError, VersionNotFoundError
from .models import ComponentCategory
from .types import ENTRY_DELIMITER, JSON_FORMAT, README_SUFFIX, SchemaFormat


@dataclass(slots=True)
class SchemaDirectoryScanner:
    """Scan ``<root>/<version>/<category>_<name>.<ext>`` asset trees."""

    root: Path
    schema_format: SchemaFormat = JSON_FORMAT

    @property
    def schema_suffix(self) -> str:
        """Return the file suffix of schema documents, including the dot."""

        return f".{self.schema_format}"

    def ensure_root(self) -> Path:
        """Return the asset root, raising when it is not a readable directory.

        Returns:
            Path: Asset root directory.

        Raises:
            DirectoryReadError: If the root is missing or not a directory.
        """
        if not self.root.is_dir():
            raise DirectoryReadError(f"failed to read schemas directory: {self.root}")
        return self.root

    def version_directories(self) -> tuple[str, ...]:
        """Return version-shaped directory names sorted lexicographically.

        Returns:
            tuple[str, ...]: Directory names containing at least one ``.``.

        Raises:
            DirectoryReadError: If the asset root cannot be listed.
        """
        root = self.ensure_root()
        try:
            children = list(root.iterdir())
        except OSError as exc:
            raise DirectoryReadError(f"failed to read schemas directory: {root}") from exc
        return tuple(sorted(child.name for child in children if child.is_dir() and "." in child.name))

    def version_directory(self, version: str) -> Path:
        """Return the directory holding ``version`` assets.

        Raises:
            DirectoryReadError: If the asset root is missing.
            VersionNotFoundError: If no directory exists for ``version``.
        """
        directory = self.ensure_root() / version
        if not directory.is_dir():
            raise VersionNotFoundError(version)
        return directory

    def schema_documents(self, version: str) -> tuple[Path, ...]:
        """Return sorted schema document paths of ``version``.

        Args:
            version: Collector version directory to scan.

        Returns:
            tuple[Path, ...]: Schema files matching the configured suffix.

        Raises:
            DirectoryReadError: If the directory cannot be listed.
            VersionNotFoundError: If no directory exists for ``version``.
        """
        return self._files_with_suffix(version, self.schema_suffix)

    def markdown_documents(self, version: str) -> tuple[Path, ...]:
        """Return sorted ``.md`` paths of ``version``, readmes and changelog alike."""
        return self._files_with_suffix(version, README_SUFFIX)

    def entries(self, version: str) -> tuple[tuple[ComponentCategory, str], ...]:
        """Return ``(category, name)`` pairs for every parseable schema file.

        Files whose stem does not split into ``category_name`` or whose
        category is unknown are skipped.
        """
        parsed: list[tuple[ComponentCategory, str]] = []
        for path in self.schema_documents(version):
            entry = parse_entry_stem(path.stem)
            if entry is not None:
                parsed.append(entry)
        return tuple(parsed)

    def _files_with_suffix(self, version: str, suffix: str) -> tuple[Path, ...]:
        directory = self.version_directory(version)
        try:
            children = list(directory.iterdir())
        except OSError as exc:
            raise DirectoryReadError(f"failed to read schema directory for version {version}") from exc
        return tuple(sorted(path for path in children if path.is_file() and path.suffix == suffix))


def parse_entry_stem(stem: str) -> tuple[ComponentCategory, str] | None:
    """Split ``stem`` on the first ``_`` into a category and a name.

    Args:
        stem: File name without suffix, e.g. ``receiver_otlp``.

    Returns:
        tuple[ComponentCategory, str] | None: Parsed entry, or ``None`` when the
        stem does not name a known category and a non-empty component.
    """
    category_token, delimiter, name = stem.partition(ENTRY_DELIMITER)
    if not delimiter or not name:
        return None
    try:
        category = ComponentCategory(category_token)
    except ValueError:
        return None
    return category, name


__all__ = ["SchemaDirectoryScanner", "parse_entry_stem"]
