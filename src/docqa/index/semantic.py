"""In-memory semantic index over whole documents and their chunks.

Every mutation (insert/remove) recomputes the IDF table over all stored
entries and then rebuilds every stored vector from its term weights. That is
O(entries x vocabulary) per mutation: fine for tens to low hundreds of
documents, not meant for more.

One re-entrant lock guards the whole instance, so insert, remove and search
never interleave (a search must not see a half-updated IDF table).
"""
from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from ..config import DF_MODES
from ..documents import Document
from .retrieve import topk_cosine
from .vectorize import TfidfVectorizer, pad, tokenize

logger = logging.getLogger(__name__)

DOCUMENT = "document"
CHUNK = "chunk"


@dataclass
class IndexEntry:
    id: str
    doc_id: str
    filename: str
    kind: str
    content: str
    weights: dict[str, float]
    vector: np.ndarray
    chunk_index: int | None = None
    keywords: list[str] = field(default_factory=list)
    _lowered: str = field(default="", init=False, repr=False)
    _terms: frozenset[str] = field(default=frozenset(), init=False, repr=False)

    def __post_init__(self) -> None:
        self._lowered = self.content.lower()
        self._terms = frozenset(tokenize(self.content))


@dataclass(frozen=True)
class ScoredEntry:
    """An index entry paired with its similarity and (re-ranked) score."""

    entry: IndexEntry
    similarity: float
    score: float


@dataclass(frozen=True)
class IndexStats:
    document_count: int
    chunk_count: int
    vocabulary_size: int
    dimension: int


class SemanticIndex:
    def __init__(self, similarity_threshold: float = 0.1, df_mode: str = "substring") -> None:
        if df_mode not in DF_MODES:
            raise ValueError(f"Unknown df_mode: {df_mode!r}")
        self.similarity_threshold = similarity_threshold
        self.df_mode = df_mode
        self._entries: dict[str, IndexEntry] = {}
        self._vectorizer = TfidfVectorizer()
        self._lock = threading.RLock()

    # ---- lifecycle ----

    def insert(self, document: Document) -> None:
        """Index a document and all of its chunks, then recompute IDF."""
        with self._lock:
            if document.id in self._entries:
                self._remove_unlocked(document.id)

            keywords = list(document.keywords)
            self._add_entry(
                entry_id=document.id,
                document=document,
                kind=DOCUMENT,
                content=document.text,
                keywords=keywords,
            )
            for chunk in document.chunks:
                self._add_entry(
                    entry_id=chunk.chunk_id,
                    document=document,
                    kind=CHUNK,
                    content=chunk.text,
                    chunk_index=chunk.ordinal,
                )

            self._recompute_idf()
            logger.info(
                "Indexed document %s (%s) with %d chunks; entries=%d dim=%d",
                document.id,
                document.filename,
                len(document.chunks),
                len(self._entries),
                self._vectorizer.vocabulary.dimension,
            )

    def remove(self, document_id: str) -> int:
        """Remove a document and its chunks. Unknown ids are a no-op."""
        with self._lock:
            removed = self._remove_unlocked(document_id)
            if removed:
                self._recompute_idf()
                logger.info("Removed document %s (%d entries)", document_id, removed)
            return removed

    def drop(self) -> None:
        """Forget everything, including the vocabulary."""
        with self._lock:
            self._entries.clear()
            self._vectorizer = TfidfVectorizer()
            logger.info("Dropped index")

    # ---- queries ----

    def search(self, query: str, top_k: int = 5) -> list[ScoredEntry]:
        with self._lock:
            if not self._entries or top_k <= 0:
                return []
            # Queries never grow the vocabulary; unseen terms carry no weight.
            qvec = self._vectorizer.vectorize(query, register=False)
            return self._rank(qvec, top_k, exclude=None)

    def find_similar(self, entry_id: str, top_k: int = 3) -> list[ScoredEntry]:
        with self._lock:
            target = self._entries.get(entry_id)
            if target is None or top_k <= 0:
                return []
            return self._rank(target.vector, top_k, exclude=entry_id)

    def get(self, entry_id: str) -> IndexEntry | None:
        with self._lock:
            return self._entries.get(entry_id)

    def idf(self, term: str) -> float:
        with self._lock:
            return self._vectorizer.idf.get(term)

    def entries(self) -> list[IndexEntry]:
        with self._lock:
            return list(self._entries.values())

    def stats(self) -> IndexStats:
        with self._lock:
            docs = sum(1 for e in self._entries.values() if e.kind == DOCUMENT)
            vocab = self._vectorizer.vocabulary
            return IndexStats(
                document_count=docs,
                chunk_count=len(self._entries) - docs,
                vocabulary_size=len(vocab),
                dimension=vocab.dimension,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        with self._lock:
            return entry_id in self._entries

    # ---- internals ----

    def _add_entry(
        self,
        entry_id: str,
        document: Document,
        kind: str,
        content: str,
        keywords: Iterable[str] = (),
        chunk_index: int | None = None,
    ) -> None:
        keywords = list(keywords)
        weights, vector = self._vectorizer.encode(content, keywords)
        self._entries[entry_id] = IndexEntry(
            id=entry_id,
            doc_id=document.id,
            filename=document.filename,
            kind=kind,
            content=content,
            weights=weights,
            vector=vector,
            chunk_index=chunk_index,
            keywords=keywords,
        )

    def _remove_unlocked(self, document_id: str) -> int:
        doomed = [eid for eid, e in self._entries.items() if e.doc_id == document_id]
        for eid in doomed:
            del self._entries[eid]
        return len(doomed)

    def _document_frequency(self, term: str) -> int:
        if self.df_mode == "token":
            return sum(1 for e in self._entries.values() if term in e._terms)
        return sum(1 for e in self._entries.values() if term in e._lowered)

    def _recompute_idf(self) -> None:
        idf = self._vectorizer.idf
        n = len(self._entries)
        if n == 0:
            idf.clear()
            return

        terms = self._vectorizer.vocabulary.terms()
        idf.replace({t: math.log(n / (self._document_frequency(t) + 1)) for t in terms})

        # IDF changes the weight scale of every term, so rebuild all vectors.
        for entry in self._entries.values():
            entry.vector = self._vectorizer.weights_to_vector(entry.weights)

        logger.debug("Recomputed IDF for %d terms over %d entries", len(terms), n)

    def _rank(self, qvec: np.ndarray, top_k: int, exclude: str | None) -> list[ScoredEntry]:
        candidates = [e for eid, e in self._entries.items() if eid != exclude]
        dim = self._vectorizer.vocabulary.dimension
        if not candidates or dim == 0 or not np.any(qvec):
            return []

        matrix = np.vstack([pad(e.vector, dim) for e in candidates])
        hits = topk_cosine(pad(qvec, dim), matrix, k=top_k, threshold=self.similarity_threshold)
        return [
            ScoredEntry(entry=candidates[h.idx], similarity=h.score, score=h.score)
            for h in hits
        ]
