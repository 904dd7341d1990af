# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests exercising the schemas shipped with the package."""

from __future__ import annotations

import pytest

from collector_schema import ComponentCategory, ComponentNotFoundError, SchemaManager, SchemaStore

OTLP_CONFIG = """
protocols:
  grpc:
    endpoint: 0.0.0.0:4317
    keepalive:
      server_parameters:
        max_connection_idle: 11s
  http:
    endpoint: 0.0.0.0:4318
    cors:
      allowed_origins:
        - https://*.example.com
"""


@pytest.fixture(scope="module")
def packaged() -> SchemaManager:
    return SchemaManager(SchemaStore())


def test_latest_packaged_version(packaged: SchemaManager) -> None:
    assert packaged.latest_version() == "0.138.0"
    assert packaged.all_versions() == ("0.137.0", "0.138.0")


def test_every_packaged_schema_loads(packaged: SchemaManager) -> None:
    for version in packaged.all_versions():
        for category, names in packaged.list_components(version).items():
            for name in names:
                schema = packaged.get_schema(category, name, version)
                assert schema.document.is_object
                assert packaged.validate_json(category, name, version, b"{}").valid


def test_packaged_components(packaged: SchemaManager) -> None:
    assert packaged.list_components() == {
        ComponentCategory.RECEIVER: ("otlp",),
        ComponentCategory.PROCESSOR: ("batch",),
        ComponentCategory.EXPORTER: ("debug",),
        ComponentCategory.EXTENSION: ("health_check",),
        ComponentCategory.CONNECTOR: ("forward",),
    }
    with pytest.raises(ComponentNotFoundError):
        packaged.get_schema("connector", "forward", "0.137.0")


def test_otlp_receiver_configuration(packaged: SchemaManager) -> None:
    assert packaged.validate_yaml("receiver", "otlp", None, OTLP_CONFIG).valid

    result = packaged.validate_json("receiver", "otlp", None, '{"protocols": {"grpc": {"endpoint": 4317}}}')
    assert not result.valid
    assert result.errors[0].field == "protocols.grpc.endpoint"


def test_batch_processor_timeout(packaged: SchemaManager) -> None:
    assert packaged.validate_json("processor", "batch", "0.138.0", '{"timeout": "200ms"}').valid
    assert not packaged.validate_json("processor", "batch", "0.138.0", '{"timeout": "200"}').valid


def test_packaged_deprecations(packaged: SchemaManager) -> None:
    paths = [item.path for item in packaged.get_deprecated_fields("extension", "health_check")]

    assert paths == ["check_collector_pipeline", "check_collector_pipeline.exporter_failure_threshold"]
    assert [item.path for item in packaged.get_deprecated_fields("exporter", "debug")] == ["loglevel"]


def test_packaged_docs(packaged: SchemaManager) -> None:
    assert packaged.get_readme("receiver", "otlp").startswith("# OTLP Receiver")
    assert packaged.get_changelog().startswith("# v0.138.0")
    assert packaged.get_changelog("0.137.0").startswith("# v0.137.0")


def test_packaged_documentation_search(packaged: SchemaManager) -> None:
    batch = packaged.query_documentation("compress batches")
    deprecations = packaged.query_documentation_with_filters("deprecated", category="exporter")

    assert batch[0].id == "0.138.0/processor_batch"
    assert [result.id for result in deprecations] == ["0.138.0/exporter_debug"]
