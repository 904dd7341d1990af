# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve the collector versions available in the schema store."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from packaging.version import Version

from .errors import DirectoryReadError
from .models import VERSION_PATTERN
from .store import SchemaStore

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class VersionResolver:
    """Order store versions semantically and pick the most recent one."""

    store: SchemaStore

    def all_versions(self) -> tuple[str, ...]:
        """Return every available version in ascending semantic order.

        Returns:
            tuple[str, ...]: Version directory names, oldest first.

        Raises:
            DirectoryReadError: If the store is unreadable or holds no versions.
        """

        versions = sort_versions(self.store.list_versions())
        if not versions:
            raise DirectoryReadError("no versions found in schemas directory")
        return versions

    def latest_version(self) -> str:
        """Return the highest available version.

        ``0.10.0`` ranks above ``0.9.0``; names are compared numerically
        rather than as strings.

        Raises:
            DirectoryReadError: If the store is unreadable or holds no versions.
        """

        return self.all_versions()[-1]


def sort_versions(names: Iterable[str]) -> tuple[str, ...]:
    """Return ``names`` that are plain release numbers, sorted semantically.

    Only ``MAJOR.MINOR.PATCH`` names count as versions, so ``1.0``,
    ``v1.0.0`` and pre-releases never become the latest version.
    """

    parsed: list[tuple[Version, str]] = []
    for name in names:
        if not VERSION_PATTERN.match(name):
            LOGGER.debug("ignoring schema directory %s: not a release version", name)
            continue
        parsed.append((Version(name), name))
    parsed.sort()
    return tuple(name for _, name in parsed)


__all__ = ["VersionResolver", "sort_versions"]
