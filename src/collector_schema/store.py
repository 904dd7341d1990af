# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Read-only access to the versioned schema asset tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .errors import ChangelogNotFoundError, ComponentNotFoundError, DirectoryReadError, ReadmeNotFoundError
from .models import ComponentCategory, ComponentIdentity
from .scanner import SchemaDirectoryScanner
from .types import CHANGELOG_FILENAME, JSON_FORMAT, README_SUFFIX, SchemaFormat

LOGGER = logging.getLogger(__name__)

DEFAULT_SCHEMA_ROOT: Final[Path] = Path(__file__).resolve().parent / "schemas"


@dataclass(slots=True)
class SchemaStore:
    """Resolve component identities to raw schema bytes and documentation.

    The tree is laid out as ``<root>/<version>/<category>_<name>.<ext>``
    with optional ``<category>_<name>.md`` readmes and one
    ``changelog.md`` per version. The store never writes.
    """

    root: Path = DEFAULT_SCHEMA_ROOT
    schema_format: SchemaFormat = JSON_FORMAT
    _scanner: SchemaDirectoryScanner = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._scanner = SchemaDirectoryScanner(self.root, self.schema_format)

    def read_schema_bytes(self, identity: ComponentIdentity) -> bytes:
        """Return the serialized schema document for ``identity``.

        Args:
            identity: Validated component identity.

        Returns:
            bytes: Raw document in the store's schema format.

        Raises:
            ComponentNotFoundError: If no schema file exists for ``identity``.
            DirectoryReadError: If the asset root is missing or unreadable.
        """

        path = self._asset_path(identity.version, f"{identity.entry_stem}{self._scanner.schema_suffix}")
        LOGGER.debug("reading schema document %s", path)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise ComponentNotFoundError(identity.category.value, identity.name) from exc
        except OSError as exc:
            raise DirectoryReadError(f"failed to read schema document {path}") from exc

    def read_readme(self, identity: ComponentIdentity) -> str:
        """Return the readme text stored next to the schema of ``identity``.

        Raises:
            ReadmeNotFoundError: If the component has no readme for the version.
            DirectoryReadError: If the asset root is missing or unreadable.
        """

        path = self._asset_path(identity.version, f"{identity.entry_stem}{README_SUFFIX}")
        try:
            return path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise ReadmeNotFoundError(identity.category.value, identity.name, identity.version) from exc
        except OSError as exc:
            raise DirectoryReadError(f"failed to read readme {path}") from exc

    def read_changelog(self, version: str) -> str:
        """Return the changelog text of ``version``.

        Raises:
            ChangelogNotFoundError: If the version has no changelog.
            DirectoryReadError: If the asset root is missing or unreadable.
        """

        path = self._asset_path(version, CHANGELOG_FILENAME)
        try:
            return path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise ChangelogNotFoundError(version) from exc
        except OSError as exc:
            raise DirectoryReadError(f"failed to read changelog {path}") from exc

    def list_versions(self) -> frozenset[str]:
        """Return every version-shaped directory name under the root."""

        return frozenset(self._scanner.version_directories())

    def list_entries(self, version: str) -> tuple[tuple[ComponentCategory, str], ...]:
        """Return ``(category, name)`` pairs stored for ``version``.

        Raises:
            VersionNotFoundError: If no directory exists for ``version``.
            DirectoryReadError: If the asset root is missing or unreadable.
        """

        return self._scanner.entries(version)

    def read_markdown_documents(self, version: str) -> tuple[tuple[str, str], ...]:
        """Return ``(file name, text)`` for every markdown file of ``version``.

        Raises:
            VersionNotFoundError: If no directory exists for ``version``.
            DirectoryReadError: If a document cannot be read.
        """

        documents: list[tuple[str, str]] = []
        for path in self._scanner.markdown_documents(version):
            try:
                documents.append((path.name, path.read_text(encoding="utf-8")))
            except (OSError, UnicodeDecodeError) as exc:
                raise DirectoryReadError(f"failed to read documentation {path}") from exc
        return tuple(documents)

    def _asset_path(self, version: str, filename: str) -> Path:
        return self._scanner.ensure_root() / version / filename


__all__ = ["DEFAULT_SCHEMA_ROOT", "SchemaStore"]
