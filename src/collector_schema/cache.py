# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Process-lifetime memoization of parsed component schemas.

Entries are written once and never evicted or mutated. Concurrent first
lookups of the same key share a single load: the first caller loads while
the others wait for its outcome, success or failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from threading import Event, Lock
from typing import Final

from .models import ComponentIdentity, ComponentSchema

LOGGER = logging.getLogger(__name__)

SchemaLoader = Callable[[ComponentIdentity], ComponentSchema]


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Describe cache state metadata.

    Attributes:
        current_size: Number of cached schemas.
        hits: Lookups answered from the cache, including waiters on an in-flight load.
        misses: Lookups that found no cached entry.
        loads: Loader invocations, successful or not.
    """

    current_size: int
    hits: int
    misses: int
    loads: int


@dataclass(slots=True)
class _InFlight:
    """Outcome slot shared by callers waiting on one load."""

    done: Event = field(default_factory=Event)
    result: ComponentSchema | None = None
    error: BaseException | None = None


class SchemaCache:
    """Thread-safe single-flight cache keyed by ``category_name_version``."""

    def __init__(self, loader: SchemaLoader) -> None:
        """Initialise the cache around ``loader``.

        Args:
            loader: Callable producing a schema on a cache miss.
        """

        self._loader = loader
        self._store: dict[str, ComponentSchema] = {}
        self._pending: dict[str, _InFlight] = {}
        self._lock = Lock()
        self._hits = 0
        self._misses = 0
        self._loads = 0

    def get(self, identity: ComponentIdentity) -> ComponentSchema:
        """Return the schema for ``identity``, loading it on first access.

        Args:
            identity: Validated component identity.

        Returns:
            ComponentSchema: Cached or freshly loaded schema.

        Raises:
            SchemaRegistryError: Whatever the loader raised; failures are not cached.
        """

        key = identity.cache_key
        with self._lock:
            cached = self._store.get(key)
            if cached is not None:
                self._hits += 1
                LOGGER.debug("schema cache hit key=%s", key)
                return cached
            waiting = self._pending.get(key)
            if waiting is None:
                self._misses += 1
                self._loads += 1
                flight = _InFlight()
                self._pending[key] = flight
            else:
                self._hits += 1
        if waiting is not None:
            return _await(waiting)

        LOGGER.debug("schema cache miss key=%s", key)
        try:
            schema = self._loader(identity)
        except BaseException as exc:
            with self._lock:
                del self._pending[key]
            flight.error = exc
            flight.done.set()
            raise
        with self._lock:
            self._store[key] = schema
            del self._pending[key]
        flight.result = schema
        flight.done.set()
        return schema

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, ComponentIdentity):
            return False
        with self._lock:
            return identity.cache_key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def info(self) -> CacheInfo:
        """Return a snapshot of the cache counters."""

        with self._lock:
            return CacheInfo(
                current_size=len(self._store),
                hits=self._hits,
                misses=self._misses,
                loads=self._loads,
            )


def _await(flight: _InFlight) -> ComponentSchema:
    flight.done.wait()
    if flight.error is not None:
        raise flight.error
    if flight.result is None:  # pragma: no cover - result is always set before done
        raise RuntimeError("schema load finished without a result")
    return flight.result


__all__: Final = ["CacheInfo", "SchemaCache", "SchemaLoader"]
