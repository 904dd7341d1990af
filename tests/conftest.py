# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from collector_schema.manager import SchemaManager
from collector_schema.store import SchemaStore

DURATION = "^[0-9]+(ns|us|µs|ms|s|m|h)$"

OTLP_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "protocols": {
            "type": "object",
            "properties": {
                "grpc": {
                    "type": "object",
                    "properties": {
                        "endpoint": {"type": "string", "description": "gRPC listen address."},
                        "max_recv_msg_size_mib": {"type": "integer"},
                    },
                },
                "http": {
                    "type": "object",
                    "properties": {
                        "endpoint": {"type": "string"},
                        "cors": {
                            "type": "object",
                            "properties": {
                                "allowed_origins": {"type": "array", "items": {"type": "string"}},
                            },
                        },
                    },
                },
            },
        },
    },
}

BATCH_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "timeout": {"type": "string", "pattern": DURATION},
        "send_batch_size": {"type": "integer"},
    },
}

DEBUG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "verbosity": {"type": "string"},
        "loglevel": {"type": "string", "deprecated": True, "description": "Use verbosity instead."},
    },
}

STRICT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "path": {"type": "string"},
    },
}


def write_schema(root: Path, version: str, stem: str, document: Mapping[str, Any]) -> Path:
    """Write ``document`` as ``<root>/<version>/<stem>.json`` and return the path."""

    directory = root / version
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{stem}.json"
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def schema_tree(tmp_path: Path) -> Path:
    """Build a two-version asset tree with readmes, changelogs and noise."""

    root = tmp_path / "schemas"
    write_schema(root, "0.9.0", "receiver_otlp", {"type": "object", "properties": {"endpoint": {"type": "string"}}})
    (root / "0.9.0" / "changelog.md").write_text("# v0.9.0\n", encoding="utf-8")

    write_schema(root, "0.10.0", "receiver_otlp", OTLP_SCHEMA)
    write_schema(root, "0.10.0", "processor_batch", BATCH_SCHEMA)
    write_schema(root, "0.10.0", "exporter_debug", DEBUG_SCHEMA)
    write_schema(root, "0.10.0", "extension_strict", STRICT_SCHEMA)
    write_schema(root, "0.10.0", "widget_gizmo", {"type": "object"})
    write_schema(root, "0.10.0", "README", {"type": "object"})
    (root / "0.10.0" / "receiver_otlp.md").write_text("# OTLP Receiver\n", encoding="utf-8")
    (root / "0.10.0" / "changelog.md").write_text("# v0.10.0\n\n- otlp: new http cors\n", encoding="utf-8")
    (root / "0.10.0" / "notes.txt").write_text("not a schema", encoding="utf-8")

    (root / "docs").mkdir()
    (root / "nightly.build").mkdir()
    (root / "stray.json").write_text("{}", encoding="utf-8")
    return root


@pytest.fixture
def store(schema_tree: Path) -> SchemaStore:
    return SchemaStore(root=schema_tree)


@pytest.fixture
def manager(store: SchemaStore) -> SchemaManager:
    return SchemaManager(store)


@pytest.fixture
def schema_writer():
    """Return the helper writing schema documents into an asset tree."""

    return write_schema
