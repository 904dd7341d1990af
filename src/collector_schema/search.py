# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Keyword search over the markdown documentation of the asset tree.

Every ``.md`` file of every version directory is indexed once, on the first
query: component readmes carry their category and name, changelogs carry
neither. Documents are ranked with BM25 term scoring.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from dataclasses import dataclass
from pathlib import PurePosixPath
from threading import Lock
from typing import Final

from .errors import InvalidQueryError
from .models import ComponentCategory
from .scanner import parse_entry_stem
from .store import SchemaStore
from .versions import sort_versions

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS: Final[int] = 5
BM25_K1: Final[float] = 1.2
BM25_B: Final[float] = 0.75
_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"[^\W_]+")


@dataclass(frozen=True, slots=True)
class DocumentSearchResult:
    """One ranked documentation match.

    Attributes:
        id: ``<version>/<file stem>``, unique across the tree.
        content: Full markdown text of the document.
        score: BM25 relevance; higher ranks first.
        version: Collector version the document belongs to.
        component: File stem, e.g. ``receiver_otlp`` or ``changelog``.
        file_path: Path of the document relative to the asset root.
        category: Component category, ``None`` for changelogs.
        name: Component name, ``None`` for changelogs.
    """

    id: str
    content: str
    score: float
    version: str
    component: str
    file_path: str
    category: ComponentCategory | None = None
    name: str | None = None


@dataclass(frozen=True, slots=True)
class _IndexedDocument:
    id: str
    content: str
    version: str
    component: str
    file_path: str
    category: ComponentCategory | None
    name: str | None
    term_counts: Counter[str]
    length: int

    def matches(self, *, category: ComponentCategory | None, name: str | None, version: str | None) -> bool:
        if version is not None and self.version != version:
            return False
        if category is not None and self.category is not category:
            return False
        return name is None or self.name == name

    def to_result(self, score: float) -> DocumentSearchResult:
        return DocumentSearchResult(
            id=self.id,
            content=self.content,
            score=score,
            version=self.version,
            component=self.component,
            file_path=self.file_path,
            category=self.category,
            name=self.name,
        )


@dataclass(frozen=True, slots=True)
class _Corpus:
    documents: tuple[_IndexedDocument, ...]
    doc_freqs: Counter[str]
    avg_length: float


class DocumentationIndex:
    """Lazily built BM25 index over the markdown files of a schema store.

    The index is built at most once per instance. A failed build is not
    memoized, so the next query retries it.
    """

    def __init__(self, store: SchemaStore, *, k1: float = BM25_K1, b: float = BM25_B) -> None:
        """Initialise the index.

        Args:
            store: Schema store whose markdown files are indexed.
            k1: Term frequency saturation parameter.
            b: Document length normalization parameter.
        """

        self._store = store
        self._k1 = k1
        self._b = b
        self._lock = Lock()
        self._corpus: _Corpus | None = None

    def __len__(self) -> int:
        return len(self._ensure_corpus().documents)

    def search(
        self,
        query: str,
        *,
        max_results: int = DEFAULT_MAX_RESULTS,
        category: ComponentCategory | None = None,
        name: str | None = None,
        version: str | None = None,
    ) -> tuple[DocumentSearchResult, ...]:
        """Return the documents best matching ``query``.

        Filters left as ``None`` do not restrict the search. Documents that
        share no term with the query are never returned.

        Args:
            query: Free-text query.
            max_results: Upper bound on the number of results.
            category: Only search readmes of this category.
            name: Only search readmes of components with this name.
            version: Only search documents of this collector version.

        Returns:
            tuple[DocumentSearchResult, ...]: Matches by descending score,
            ties broken by id.

        Raises:
            InvalidQueryError: If ``max_results`` is below one or the query
                holds no searchable word.
            DirectoryReadError: If the asset tree cannot be indexed.
        """

        if max_results < 1:
            raise InvalidQueryError(f"max_results must be at least 1, got {max_results}")
        terms = tokenize(query)
        if not terms:
            raise InvalidQueryError("search query must contain at least one word")
        corpus = self._ensure_corpus()
        scored: list[tuple[float, _IndexedDocument]] = []
        for document in corpus.documents:
            if not document.matches(category=category, name=name, version=version):
                continue
            score = self._score(corpus, document, terms)
            if score > 0:
                scored.append((score, document))
        scored.sort(key=lambda item: (-item[0], item[1].id))
        LOGGER.debug("documentation query %r matched %d document(s)", query, len(scored))
        return tuple(document.to_result(score) for score, document in scored[:max_results])

    def _score(self, corpus: _Corpus, document: _IndexedDocument, terms: list[str]) -> float:
        total = len(corpus.documents)
        norm_factor = 1 - self._b + self._b * (document.length / corpus.avg_length) if corpus.avg_length else 1.0
        score = 0.0
        for term in set(terms):
            tf = document.term_counts.get(term, 0)
            if not tf:
                continue
            df = corpus.doc_freqs[term]
            idf = math.log((total - df + 0.5) / (df + 0.5) + 1.0)
            score += idf * (tf * (self._k1 + 1)) / (tf + self._k1 * norm_factor)
        return score

    def _ensure_corpus(self) -> _Corpus:
        with self._lock:
            if self._corpus is None:
                self._corpus = self._build()
            return self._corpus

    def _build(self) -> _Corpus:
        documents: list[_IndexedDocument] = []
        doc_freqs: Counter[str] = Counter()
        for version in sort_versions(self._store.list_versions()):
            for filename, content in self._store.read_markdown_documents(version):
                stem = PurePosixPath(filename).stem
                entry = parse_entry_stem(stem)
                tokens = tokenize(content)
                counts = Counter(tokens)
                doc_freqs.update(counts.keys())
                documents.append(
                    _IndexedDocument(
                        id=f"{version}/{stem}",
                        content=content,
                        version=version,
                        component=stem,
                        file_path=f"{version}/{filename}",
                        category=entry[0] if entry else None,
                        name=entry[1] if entry else None,
                        term_counts=counts,
                        length=len(tokens),
                    )
                )
        avg_length = sum(document.length for document in documents) / len(documents) if documents else 0.0
        LOGGER.debug("indexed %d documentation file(s) under %s", len(documents), self._store.root)
        return _Corpus(documents=tuple(documents), doc_freqs=doc_freqs, avg_length=avg_length)


def tokenize(text: str) -> list[str]:
    """Split ``text`` into lowercase alphanumeric terms.

    Underscores separate terms, so ``health_check`` yields ``health`` and
    ``check``.
    """

    return _TOKEN_PATTERN.findall(text.lower())


__all__ = [
    "BM25_B",
    "BM25_K1",
    "DEFAULT_MAX_RESULTS",
    "DocumentSearchResult",
    "DocumentationIndex",
    "tokenize",
]
