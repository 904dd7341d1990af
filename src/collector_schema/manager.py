# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public entry point composing the store, cache, validator, and scanners."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .cache import CacheInfo, SchemaCache
from .deprecation import DeprecationScanner
from .errors import InvalidIdentityError, NotFoundError
from .io import decode_json_config, decode_schema_bytes, decode_yaml_config, encode_canonical_json
from .models import (
    VERSION_PATTERN,
    ComponentCategory,
    ComponentIdentity,
    ComponentSchema,
    DeprecatedField,
    SchemaNode,
    ValidationResult,
)
from .search import DEFAULT_MAX_RESULTS, DocumentSearchResult, DocumentationIndex
from .settings import RegistrySettings, resolve_settings
from .store import SchemaStore
from .validator import ConfigValidator
from .versions import VersionResolver

LOGGER = logging.getLogger(__name__)

CategoryLike = ComponentCategory | str


class SchemaManager:
    """Look up, list, validate against, and inspect component schemas.

    Every operation runs synchronously on the caller's thread and is safe to
    call concurrently. A ``version`` of ``None`` means the latest version in
    the store.
    """

    def __init__(
        self,
        store: SchemaStore | None = None,
        *,
        deprecation_scanner: DeprecationScanner | None = None,
    ) -> None:
        """Initialise the manager.

        Args:
            store: Schema store to read from; defaults to the packaged schemas.
            deprecation_scanner: Scanner used by :meth:`get_deprecated_fields`.
        """

        self._store = store if store is not None else SchemaStore()
        self._versions = VersionResolver(self._store)
        self._cache = SchemaCache(self._load_schema)
        self._validator = ConfigValidator()
        self._deprecations = deprecation_scanner or DeprecationScanner()
        self._documentation = DocumentationIndex(self._store)

    @classmethod
    def from_settings(cls, settings: RegistrySettings | None = None) -> SchemaManager:
        """Return a manager configured from ``settings`` or the environment.

        Args:
            settings: Explicit settings; ``None`` resolves them from the environment.

        Returns:
            SchemaManager: Manager bound to the configured asset tree.
        """

        resolved = resolve_settings(settings)
        store = SchemaStore(root=resolved.resolved_root, schema_format=resolved.schema_format)
        return cls(store, deprecation_scanner=DeprecationScanner(include_array_items=resolved.scan_array_items))

    @property
    def store(self) -> SchemaStore:
        """Return the underlying schema store."""

        return self._store

    # Lookup ----------------------------------------------------------------

    def get_schema(self, category: CategoryLike, name: str, version: str | None = None) -> ComponentSchema:
        """Return the schema of one component.

        Args:
            category: Component category.
            name: Component name, e.g. ``otlp``.
            version: Collector version; ``None`` selects the latest.

        Returns:
            ComponentSchema: Cached, immutable schema.

        Raises:
            InvalidCategoryError: If ``category`` is outside the closed set.
            InvalidIdentityError: If ``name`` or ``version`` is malformed.
            ComponentNotFoundError: If the store has no such schema.
            DirectoryReadError: If the asset tree is missing or corrupted.
        """

        return self._cache.get(self._identity(category, name, version))

    def get_schema_document(self, category: CategoryLike, name: str, version: str | None = None) -> SchemaNode:
        """Return only the document tree of :meth:`get_schema`."""

        return self.get_schema(category, name, version).document

    def get_schema_json(self, category: CategoryLike, name: str, version: str | None = None) -> bytes:
        """Return the schema document as canonical, indented JSON bytes."""

        return self.get_schema(category, name, version).to_json()

    def get_readme(self, category: CategoryLike, name: str, version: str | None = None) -> str:
        """Return the readme text of a component.

        Raises:
            ReadmeNotFoundError: If the component ships no readme for the version.
        """

        return self._store.read_readme(self._identity(category, name, version))

    def get_changelog(self, version: str | None = None) -> str:
        """Return the changelog of ``version``.

        Raises:
            InvalidIdentityError: If ``version`` is not a dotted release number.
            ChangelogNotFoundError: If the version has no changelog.
        """

        return self._store.read_changelog(self._resolve_version(version))

    # Listing ---------------------------------------------------------------

    def list_components(self, version: str | None = None) -> dict[ComponentCategory, tuple[str, ...]]:
        """Return component names grouped by category.

        Categories without components are omitted; names are sorted.

        Raises:
            InvalidIdentityError: If ``version`` is not a dotted release number.
            VersionNotFoundError: If ``version`` has no directory.
        """

        grouped: dict[ComponentCategory, list[str]] = {}
        for category, name in self._store.list_entries(self._resolve_version(version)):
            grouped.setdefault(category, []).append(name)
        return {category: tuple(sorted(names)) for category, names in sorted(grouped.items(), key=_category_order)}

    def list_component_names(self, category: CategoryLike, version: str | None = None) -> tuple[str, ...]:
        """Return sorted names of ``category`` components in ``version``.

        Raises:
            InvalidCategoryError: If ``category`` is outside the closed set.
            NotFoundError: If the version holds no component of the category.
        """

        parsed = ComponentCategory.parse(category)
        resolved = self._resolve_version(version)
        names = sorted(name for entry_category, name in self._store.list_entries(resolved) if entry_category is parsed)
        if not names:
            raise NotFoundError(f"no {parsed.value} components found for version {resolved}")
        return tuple(names)

    def latest_version(self) -> str:
        """Return the most recent collector version in the store."""

        return self._versions.latest_version()

    def all_versions(self) -> tuple[str, ...]:
        """Return every collector version in ascending order."""

        return self._versions.all_versions()

    # Validation ------------------------------------------------------------

    def validate_json(
        self,
        category: CategoryLike,
        name: str,
        version: str | None,
        json_data: bytes | str,
    ) -> ValidationResult:
        """Validate a JSON configuration document against a component schema.

        Args:
            category: Component category.
            name: Component name.
            version: Collector version; ``None`` selects the latest.
            json_data: Candidate configuration as JSON text or bytes.

        Returns:
            ValidationResult: ``valid=False`` with every mismatch when invalid.

        Raises:
            ComponentNotFoundError: If the schema does not exist.
            ConfigParseError: If ``json_data`` is not well-formed JSON.
        """

        schema = self.get_schema(category, name, version)
        instance = decode_json_config(json_data)
        result = self._validator.validate(schema, instance)
        LOGGER.debug("validated %s valid=%s errors=%d", schema.identity, result.valid, len(result.errors))
        return result

    def validate_yaml(
        self,
        category: CategoryLike,
        name: str,
        version: str | None,
        yaml_data: bytes | str,
    ) -> ValidationResult:
        """Validate a YAML configuration document against a component schema.

        The YAML is normalised to canonical JSON and validated through
        :meth:`validate_json`, so both encodings share one code path.

        Raises:
            ConfigParseError: If ``yaml_data`` is not well-formed YAML.
            ComponentNotFoundError: If the schema does not exist.
        """

        canonical = encode_canonical_json(decode_yaml_config(yaml_data))
        return self.validate_json(category, name, version, canonical)

    # Deprecations ----------------------------------------------------------

    def get_deprecated_fields(
        self,
        category: CategoryLike,
        name: str,
        version: str | None = None,
    ) -> tuple[DeprecatedField, ...]:
        """Return deprecated fields of a component schema with dotted paths."""

        schema = self.get_schema(category, name, version)
        return self._deprecations.scan(schema.document)

    # Documentation search --------------------------------------------------

    def query_documentation(
        self,
        query: str,
        version: str | None = None,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> tuple[DocumentSearchResult, ...]:
        """Search the readmes and changelog of one collector version.

        Args:
            query: Free-text query, e.g. ``grpc keepalive``.
            version: Collector version; ``None`` selects the latest.
            max_results: Upper bound on the number of results.

        Returns:
            tuple[DocumentSearchResult, ...]: Matches by descending score.

        Raises:
            InvalidIdentityError: If ``version`` is not a dotted release number.
            InvalidQueryError: If the query holds no word or ``max_results`` < 1.
        """

        return self._documentation.search(query, max_results=max_results, version=self._resolve_version(version))

    def query_documentation_with_filters(
        self,
        query: str,
        max_results: int = DEFAULT_MAX_RESULTS,
        *,
        category: CategoryLike | None = None,
        name: str | None = None,
        version: str | None = None,
    ) -> tuple[DocumentSearchResult, ...]:
        """Search documentation across versions, narrowed by optional filters.

        Unlike :meth:`query_documentation`, a missing ``version`` searches
        every version. Any filter left empty does not restrict the search.

        Raises:
            InvalidCategoryError: If ``category`` is outside the closed set.
            InvalidIdentityError: If ``version`` is not a dotted release number.
            InvalidQueryError: If the query holds no word or ``max_results`` < 1.
        """

        parsed = ComponentCategory.parse(category) if category else None
        resolved = self._resolve_version(version) if version else None
        return self._documentation.search(
            query,
            max_results=max_results,
            category=parsed,
            name=name or None,
            version=resolved,
        )

    # Introspection ---------------------------------------------------------

    def cache_info(self) -> CacheInfo:
        """Return schema cache counters."""

        return self._cache.info()

    def _identity(self, category: CategoryLike, name: str, version: str | None) -> ComponentIdentity:
        parsed = ComponentCategory.parse(category)
        return ComponentIdentity.create(parsed, name, self._resolve_version(version))

    def _resolve_version(self, version: str | None) -> str:
        if not version:
            return self._versions.latest_version()
        if not VERSION_PATTERN.match(version):
            raise InvalidIdentityError(f"invalid collector version: {version!r}")
        return version

    def _load_schema(self, identity: ComponentIdentity) -> ComponentSchema:
        data = self._store.read_schema_bytes(identity)
        document = decode_schema_bytes(data, schema_format=self._store.schema_format, context=str(identity))
        return ComponentSchema.from_document(identity, document)


_CATEGORY_RANK: Mapping[ComponentCategory, int] = {category: index for index, category in enumerate(ComponentCategory)}


def _category_order(item: tuple[ComponentCategory, list[str]]) -> int:
    return _CATEGORY_RANK[item[0]]


__all__ = ["CategoryLike", "SchemaManager"]
