# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for semantic version ordering of the asset tree."""

from __future__ import annotations

from pathlib import Path

import pytest

from collector_schema.errors import DirectoryReadError
from collector_schema.store import SchemaStore
from collector_schema.versions import VersionResolver, sort_versions


def test_latest_version_is_semantic(store: SchemaStore) -> None:
    resolver = VersionResolver(store)

    assert resolver.all_versions() == ("0.9.0", "0.10.0")
    assert resolver.latest_version() == "0.10.0"


def test_sort_versions_ignores_unparseable_names() -> None:
    assert sort_versions(["1.0.0", "0.100.0", "nightly.build", "0.99.1"]) == ("0.99.1", "0.100.0", "1.0.0")


def test_sort_versions_requires_three_numeric_parts() -> None:
    assert sort_versions(["1.0", "v1.0.0", "1.0.0rc1", "0.2.0.post1", "0.9.0", "0.10.0"]) == ("0.9.0", "0.10.0")


def test_empty_tree_has_no_versions(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    resolver = VersionResolver(SchemaStore(root=tmp_path))

    with pytest.raises(DirectoryReadError) as excinfo:
        resolver.latest_version()

    assert str(excinfo.value) == "no versions found in schemas directory"
