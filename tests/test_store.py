# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the schema asset tree store and scanner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from collector_schema.errors import (
    ChangelogNotFoundError,
    ComponentNotFoundError,
    DirectoryReadError,
    ReadmeNotFoundError,
    VersionNotFoundError,
)
from collector_schema.models import ComponentCategory, ComponentIdentity
from collector_schema.scanner import SchemaDirectoryScanner, parse_entry_stem
from collector_schema.store import DEFAULT_SCHEMA_ROOT, SchemaStore


def test_read_schema_bytes_returns_document(store: SchemaStore) -> None:
    identity = ComponentIdentity.create("receiver", "otlp", "0.10.0")

    payload = json.loads(store.read_schema_bytes(identity))

    assert "protocols" in payload["properties"]


def test_missing_schema_reports_category_and_name(store: SchemaStore) -> None:
    identity = ComponentIdentity.create("receiver", "nonexistent", "0.10.0")

    with pytest.raises(ComponentNotFoundError) as excinfo:
        store.read_schema_bytes(identity)

    assert str(excinfo.value) == "schema not found for component receiver nonexistent"


def test_missing_version_directory_is_component_not_found(store: SchemaStore) -> None:
    identity = ComponentIdentity.create("receiver", "otlp", "9.9.9")

    with pytest.raises(ComponentNotFoundError):
        store.read_schema_bytes(identity)


def test_read_readme_and_changelog(store: SchemaStore) -> None:
    identity = ComponentIdentity.create("receiver", "otlp", "0.10.0")

    assert store.read_readme(identity).startswith("# OTLP Receiver")
    assert "otlp: new http cors" in store.read_changelog("0.10.0")


def test_missing_readme_and_changelog(store: SchemaStore) -> None:
    identity = ComponentIdentity.create("processor", "batch", "0.10.0")

    with pytest.raises(ReadmeNotFoundError) as readme_error:
        store.read_readme(identity)
    with pytest.raises(ChangelogNotFoundError) as changelog_error:
        store.read_changelog("1.2.3")

    assert str(readme_error.value) == "README not found for component processor batch v0.10.0"
    assert str(changelog_error.value) == "changelog not found for version 1.2.3"


def test_list_versions_only_returns_dotted_directories(store: SchemaStore) -> None:
    assert store.list_versions() == frozenset({"0.9.0", "0.10.0", "nightly.build"})


def test_list_entries_skips_unknown_categories_and_other_files(store: SchemaStore) -> None:
    entries = set(store.list_entries("0.10.0"))

    assert entries == {
        (ComponentCategory.RECEIVER, "otlp"),
        (ComponentCategory.PROCESSOR, "batch"),
        (ComponentCategory.EXPORTER, "debug"),
        (ComponentCategory.EXTENSION, "strict"),
    }


def test_list_entries_for_unknown_version(store: SchemaStore) -> None:
    with pytest.raises(VersionNotFoundError) as excinfo:
        store.list_entries("7.7.7")

    assert str(excinfo.value) == "no schemas found for version 7.7.7"


def test_missing_root_is_directory_read_error(tmp_path: Path) -> None:
    store = SchemaStore(root=tmp_path / "absent")

    with pytest.raises(DirectoryReadError):
        store.list_versions()
    with pytest.raises(DirectoryReadError):
        store.read_schema_bytes(ComponentIdentity.create("receiver", "otlp", "0.1.0"))


def test_yaml_store_reads_yaml_documents(tmp_path: Path) -> None:
    version_dir = tmp_path / "0.1.0"
    version_dir.mkdir()
    (version_dir / "processor_batch.yaml").write_text("type: object\n", encoding="utf-8")
    (version_dir / "processor_memory_limiter.json").write_text("{}", encoding="utf-8")
    store = SchemaStore(root=tmp_path, schema_format="yaml")

    assert store.list_entries("0.1.0") == ((ComponentCategory.PROCESSOR, "batch"),)
    assert store.read_schema_bytes(ComponentIdentity.create("processor", "batch", "0.1.0")) == b"type: object\n"


def test_scanner_schema_documents_are_sorted(schema_tree: Path) -> None:
    scanner = SchemaDirectoryScanner(schema_tree)

    names = [path.name for path in scanner.schema_documents("0.10.0")]

    assert names == sorted(names)
    assert "notes.txt" not in names


@pytest.mark.parametrize(
    ("stem", "expected"),
    [
        ("receiver_otlp", (ComponentCategory.RECEIVER, "otlp")),
        ("extension_health_check", (ComponentCategory.EXTENSION, "health_check")),
        ("connector_", None),
        ("README", None),
        ("widget_gizmo", None),
    ],
)
def test_parse_entry_stem(stem: str, expected: tuple[ComponentCategory, str] | None) -> None:
    assert parse_entry_stem(stem) == expected


def test_default_root_points_at_packaged_schemas() -> None:
    assert DEFAULT_SCHEMA_ROOT.name == "schemas"
    assert DEFAULT_SCHEMA_ROOT.parent.name == "collector_schema"
