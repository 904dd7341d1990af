# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for keyword search over the packaged documentation."""

from __future__ import annotations

from pathlib import Path

import pytest

from collector_schema.errors import DirectoryReadError, InvalidCategoryError, InvalidIdentityError, InvalidQueryError
from collector_schema.manager import SchemaManager
from collector_schema.models import ComponentCategory
from collector_schema.search import DocumentationIndex, tokenize
from collector_schema.store import SchemaStore


@pytest.fixture
def documented_tree(schema_tree: Path) -> Path:
    (schema_tree / "0.10.0" / "processor_batch.md").write_text(
        "# Batch Processor\n\nBatches spans before export. Tune send_batch_size and timeout.\n",
        encoding="utf-8",
    )
    (schema_tree / "0.10.0" / "exporter_debug.md").write_text(
        "# Debug Exporter\n\nWrites telemetry to the console. The loglevel setting is deprecated.\n",
        encoding="utf-8",
    )
    (schema_tree / "0.9.0" / "receiver_otlp.md").write_text(
        "# OTLP Receiver\n\nLegacy grpc endpoint.\n",
        encoding="utf-8",
    )
    return schema_tree


@pytest.fixture
def documented(documented_tree: Path) -> SchemaManager:
    return SchemaManager(SchemaStore(root=documented_tree))


def test_query_documentation_defaults_to_latest(documented: SchemaManager) -> None:
    results = documented.query_documentation("otlp receiver")

    assert [result.id for result in results] == ["0.10.0/receiver_otlp", "0.10.0/changelog"]
    best = results[0]
    assert best.category is ComponentCategory.RECEIVER
    assert best.name == "otlp"
    assert best.component == "receiver_otlp"
    assert best.file_path == "0.10.0/receiver_otlp.md"
    assert best.content.startswith("# OTLP Receiver")
    assert best.score > results[1].score > 0


def test_changelog_results_carry_no_component(documented: SchemaManager) -> None:
    (result,) = documented.query_documentation("CORS", "0.10.0")

    assert result.component == "changelog"
    assert result.category is None
    assert result.name is None


def test_filters_default_to_every_version(documented: SchemaManager) -> None:
    results = documented.query_documentation_with_filters("otlp receiver")

    assert {result.id for result in results} == {
        "0.9.0/receiver_otlp",
        "0.10.0/receiver_otlp",
        "0.10.0/changelog",
    }
    assert [result.id for result in documented.query_documentation_with_filters("grpc")] == ["0.9.0/receiver_otlp"]


def test_filters_narrow_by_category_and_name(documented: SchemaManager) -> None:
    by_category = documented.query_documentation_with_filters("timeout", category="processor")
    by_name = documented.query_documentation_with_filters("deprecated", name="debug", version="0.10.0")
    mismatched = documented.query_documentation_with_filters("batch", category=ComponentCategory.RECEIVER)

    assert [result.id for result in by_category] == ["0.10.0/processor_batch"]
    assert [result.id for result in by_name] == ["0.10.0/exporter_debug"]
    assert mismatched == ()


def test_max_results_caps_the_ranking(documented: SchemaManager) -> None:
    results = documented.query_documentation_with_filters("otlp", max_results=1)

    assert len(results) == 1


def test_unmatched_query_returns_nothing(documented: SchemaManager) -> None:
    assert documented.query_documentation("kafka") == ()


def test_invalid_queries_are_rejected(documented: SchemaManager) -> None:
    with pytest.raises(InvalidQueryError):
        documented.query_documentation("otlp", max_results=0)
    with pytest.raises(InvalidQueryError):
        documented.query_documentation("!!! ???")
    with pytest.raises(InvalidIdentityError):
        documented.query_documentation("otlp", "../..")
    with pytest.raises(InvalidIdentityError):
        documented.query_documentation_with_filters("otlp", version="latest")
    with pytest.raises(InvalidCategoryError):
        documented.query_documentation_with_filters("otlp", category="pipeline")


def test_index_is_built_once(documented_tree: Path) -> None:
    index = DocumentationIndex(SchemaStore(root=documented_tree))

    assert index.search("legacy")
    (documented_tree / "0.10.0" / "connector_forward.md").write_text("# Forward legacy\n", encoding="utf-8")

    assert [result.id for result in index.search("legacy")] == ["0.9.0/receiver_otlp"]
    assert len(index) == 6


def test_index_skips_non_release_directories(documented_tree: Path) -> None:
    (documented_tree / "1.0").mkdir()
    (documented_tree / "1.0" / "receiver_otlp.md").write_text("# stray otlp\n", encoding="utf-8")
    index = DocumentationIndex(SchemaStore(root=documented_tree))

    assert all(result.version != "1.0" for result in index.search("otlp", max_results=10))


def test_failed_build_is_retried(tmp_path: Path) -> None:
    root = tmp_path / "schemas"
    index = DocumentationIndex(SchemaStore(root=root))

    with pytest.raises(DirectoryReadError):
        index.search("otlp")
    (root / "1.2.3").mkdir(parents=True)
    (root / "1.2.3" / "receiver_otlp.md").write_text("# OTLP\n", encoding="utf-8")

    assert [result.id for result in index.search("otlp")] == ["1.2.3/receiver_otlp"]


def test_tokenize_splits_on_underscores_and_punctuation() -> None:
    assert tokenize("Health_Check v0.10.0, send-batch") == ["health", "check", "v0", "10", "0", "send", "batch"]
