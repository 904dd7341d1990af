# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line interface for inspecting the packaged component schemas."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Final

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .console import detect_tty, fail, get_console_manager, ok, warn
from .errors import SchemaRegistryError
from .generator import SchemaGenerator, load_config_type
from .manager import SchemaManager
from .models import ComponentCategory, ValidationResult
from .search import DEFAULT_MAX_RESULTS, DocumentSearchResult
from .settings import ConfigError, resolve_settings

INVALID_CONFIG_EXIT_CODE: Final[int] = 2
_YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})
_PACKAGE_LOGGER: Final[str] = "collector_schema"


class FormatChoice(str, Enum):
    """Serialization formats accepted on the command line."""

    JSON = "json"
    YAML = "yaml"


@dataclass(slots=True)
class CLIState:
    """Objects shared by every command of one invocation."""

    manager: SchemaManager
    use_emoji: bool


app = typer.Typer(
    name="collector-schema",
    help="Inspect and validate OpenTelemetry collector component configuration schemas.",
    no_args_is_help=True,
    add_completion=False,
)

CategoryArgument = Annotated[ComponentCategory, typer.Argument(help="Component category.", case_sensitive=True)]
NameArgument = Annotated[str, typer.Argument(help="Component name, e.g. otlp.")]
VersionOption = Annotated[
    str | None,
    typer.Option("--collector-version", "-V", help="Collector version, defaults to the latest."),
]


@app.callback()
def main(
    ctx: typer.Context,
    schema_root: Annotated[
        Path | None,
        typer.Option("--schema-root", help="Schema asset tree to read instead of the packaged one."),
    ] = None,
    schema_format: Annotated[
        FormatChoice | None,
        typer.Option("--schema-format", help="Serialization of the schema documents."),
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in output.")] = False,
) -> None:
    """Configure the schema manager shared by the sub-commands."""

    if debug:
        _enable_debug_logging()
    try:
        settings = resolve_settings()
    except ConfigError as exc:
        fail(str(exc), use_emoji=not no_emoji)
        raise typer.Exit(code=1) from exc
    updates: dict[str, object] = {}
    if schema_root is not None:
        updates["schema_root"] = schema_root
    if schema_format is not None:
        updates["schema_format"] = schema_format.value
    if updates:
        settings = settings.model_copy(update=updates)
    ctx.obj = CLIState(manager=SchemaManager.from_settings(settings), use_emoji=not no_emoji)


def _enable_debug_logging() -> None:
    """Stream package debug records to stderr."""

    logger = logging.getLogger(_PACKAGE_LOGGER)
    if getattr(logger, "_collector_schema_debug_configured", False):
        return
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    setattr(logger, "_collector_schema_debug_configured", True)


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover - callback always runs first
        raise typer.Exit(code=1)
    return state


def _abort(state: CLIState, exc: Exception) -> typer.Exit:
    fail(str(exc), use_emoji=state.use_emoji)
    return typer.Exit(code=1)


def _stdout() -> Console:
    return get_console_manager().get(color=detect_tty(), emoji=False)


@app.command("versions")
def versions_command(ctx: typer.Context) -> None:
    """List the collector versions with packaged schemas."""

    state = _state(ctx)
    try:
        versions = state.manager.all_versions()
    except SchemaRegistryError as exc:
        raise _abort(state, exc) from exc
    latest = versions[-1]
    for version in versions:
        typer.echo(f"{version} (latest)" if version == latest else version)


@app.command("components")
def components_command(
    ctx: typer.Context,
    category: Annotated[
        ComponentCategory | None,
        typer.Option("--type", "-t", help="Only list components of this category."),
    ] = None,
    version: VersionOption = None,
) -> None:
    """List components available for a collector version."""

    state = _state(ctx)
    try:
        if category is not None:
            for name in state.manager.list_component_names(category, version):
                typer.echo(name)
            return
        grouped = state.manager.list_components(version)
    except SchemaRegistryError as exc:
        raise _abort(state, exc) from exc
    table = Table(title="Components", box=box.SIMPLE)
    table.add_column("Type", style="bold")
    table.add_column("Components", overflow="fold")
    for group, names in grouped.items():
        table.add_row(group.value, ", ".join(names))
    _stdout().print(table)


@app.command("schema")
def schema_command(ctx: typer.Context, category: CategoryArgument, name: NameArgument, version: VersionOption = None) -> None:
    """Print the configuration schema of a component as JSON."""

    state = _state(ctx)
    try:
        payload = state.manager.get_schema_json(category, name, version)
    except SchemaRegistryError as exc:
        raise _abort(state, exc) from exc
    typer.echo(payload.decode("utf-8"))


@app.command("validate")
def validate_command(
    ctx: typer.Context,
    category: CategoryArgument,
    name: NameArgument,
    config_file: Annotated[Path, typer.Argument(help="Configuration file to validate.", exists=True, dir_okay=False)],
    config_format: Annotated[
        FormatChoice | None,
        typer.Option("--format", "-f", help="Configuration format, inferred from the file suffix by default."),
    ] = None,
    version: VersionOption = None,
) -> None:
    """Validate a component configuration file against its schema."""

    state = _state(ctx)
    resolved_format = config_format or (
        FormatChoice.YAML if config_file.suffix.lower() in _YAML_SUFFIXES else FormatChoice.JSON
    )
    data = config_file.read_bytes()
    try:
        if resolved_format is FormatChoice.YAML:
            result = state.manager.validate_yaml(category, name, version, data)
        else:
            result = state.manager.validate_json(category, name, version, data)
    except SchemaRegistryError as exc:
        raise _abort(state, exc) from exc
    _render_validation(state, result)
    if not result.valid:
        raise typer.Exit(code=INVALID_CONFIG_EXIT_CODE)


def _render_validation(state: CLIState, result: ValidationResult) -> None:
    if result.valid:
        ok("configuration is valid", use_emoji=state.use_emoji)
        return
    table = Table(title="Validation errors", box=box.SIMPLE)
    table.add_column("Field", style="bold")
    table.add_column("Problem", overflow="fold")
    for issue in result.errors:
        table.add_row(issue.field, issue.message)
    _stdout().print(table)
    fail(f"configuration is invalid: {len(result.errors)} error(s)", use_emoji=state.use_emoji)


@app.command("deprecated")
def deprecated_command(
    ctx: typer.Context,
    category: CategoryArgument,
    name: NameArgument,
    version: VersionOption = None,
) -> None:
    """List deprecated configuration fields of a component."""

    state = _state(ctx)
    try:
        fields = state.manager.get_deprecated_fields(category, name, version)
    except SchemaRegistryError as exc:
        raise _abort(state, exc) from exc
    if not fields:
        ok(f"no deprecated fields in {category.value} {name}", use_emoji=state.use_emoji)
        return
    table = Table(title="Deprecated fields", box=box.SIMPLE)
    table.add_column("Field", style="bold")
    table.add_column("Type")
    table.add_column("Description", overflow="fold")
    for item in fields:
        table.add_row(item.path, item.declared_type, item.description or "-")
    _stdout().print(table)
    warn(f"{len(fields)} deprecated field(s) in {category.value} {name}", use_emoji=state.use_emoji)


@app.command("readme")
def readme_command(ctx: typer.Context, category: CategoryArgument, name: NameArgument, version: VersionOption = None) -> None:
    """Print the readme of a component."""

    state = _state(ctx)
    try:
        text = state.manager.get_readme(category, name, version)
    except SchemaRegistryError as exc:
        raise _abort(state, exc) from exc
    typer.echo(text)


@app.command("changelog")
def changelog_command(ctx: typer.Context, version: VersionOption = None) -> None:
    """Print the changelog of a collector version."""

    state = _state(ctx)
    try:
        text = state.manager.get_changelog(version)
    except SchemaRegistryError as exc:
        raise _abort(state, exc) from exc
    typer.echo(text)


@app.command("search")
def search_command(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Words to look for in component readmes and changelogs.")],
    category: Annotated[
        ComponentCategory | None,
        typer.Option("--type", "-t", help="Only search readmes of this category."),
    ] = None,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Only search readmes of this component.")] = None,
    version: VersionOption = None,
    all_versions: Annotated[
        bool,
        typer.Option("--all-versions", help="Search every version instead of only the latest."),
    ] = False,
    limit: Annotated[int, typer.Option("--limit", "-l", min=1, help="Maximum number of results.")] = DEFAULT_MAX_RESULTS,
) -> None:
    """Search the packaged documentation by keyword."""

    state = _state(ctx)
    try:
        if version is None and not all_versions:
            version = state.manager.latest_version()
        results = state.manager.query_documentation_with_filters(
            query,
            limit,
            category=category,
            name=name,
            version=version,
        )
    except SchemaRegistryError as exc:
        raise _abort(state, exc) from exc
    if not results:
        warn(f"no documentation matches '{query}'", use_emoji=state.use_emoji)
        return
    table = Table(title="Documentation", box=box.SIMPLE)
    table.add_column("Score", justify="right")
    table.add_column("Version")
    table.add_column("Document", style="bold")
    table.add_column("Title", overflow="fold")
    for result in results:
        table.add_row(f"{result.score:.3f}", result.version, result.component, _title(result))
    _stdout().print(table)


def _title(result: DocumentSearchResult) -> str:
    for line in result.content.splitlines():
        stripped = line.strip().lstrip("#").strip()
        if stripped:
            return stripped
    return "-"


@app.command("generate")
def generate_command(
    ctx: typer.Context,
    target: Annotated[str, typer.Argument(help="Configuration class as module:Class.")],
    category: CategoryArgument,
    name: NameArgument,
    version: Annotated[str, typer.Option("--collector-version", "-V", help="Collector version to write.")],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", file_okay=False, help="Asset tree to write into."),
    ] = Path("schemas"),
    readme: Annotated[
        Path | None,
        typer.Option("--readme", exists=True, dir_okay=False, help="Readme copied next to the schema."),
    ] = None,
) -> None:
    """Generate the schema document of a configuration class."""

    state = _state(ctx)
    try:
        config_type = load_config_type(target)
        path = SchemaGenerator(output).generate_component(category, name, config_type, version, readme=readme)
    except (SchemaRegistryError, TypeError, OSError) as exc:
        raise _abort(state, exc) from exc
    ok(f"wrote {path}", use_emoji=state.use_emoji)


__all__ = ["app"]
