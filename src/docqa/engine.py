"""Question answering over a user's indexed documents.

Flow: analyze query -> search the owner's index -> re-rank with entity
boosts -> extractive synthesis -> confidence. An optional external generator
may replace the extractive answer; if it fails, the extractive answer is
returned and the result is flagged as degraded.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Protocol

from .chunkers.sentence_window import SentenceWindowChunker
from .config import EngineConfig
from .documents import Document, build_document
from .index.registry import IndexRegistry
from .index.semantic import IndexStats, ScoredEntry, SemanticIndex
from .query.analyzer import QueryAnalysis, analyze_query
from .query.confidence import confidence_score
from .query.entities import dedupe
from .query.rank import rerank_with_entities
from .query.synthesize import build_context, excerpt, source_filenames, synthesize

logger = logging.getLogger(__name__)


@dataclass
class Source:
    doc_id: str
    filename: str
    content: str
    relevance: float
    chunk_index: int | None = None


@dataclass
class QueryMetadata:
    processing_ms: float
    documents_searched: int
    chunks_retrieved: int


@dataclass
class QueryResult:
    answer: str
    confidence: float
    query_type: str
    sources: list[Source] = field(default_factory=list)
    entities: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    metadata: QueryMetadata | None = None
    generated: bool = False
    degraded: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class EngineStats:
    total_documents: int
    owner_counts: dict[str, int] = field(default_factory=dict)
    indexes: dict[str, IndexStats] = field(default_factory=dict)


@dataclass
class ContextBundle:
    """Ranked context handed to an external answer generator."""

    query: str
    analysis: QueryAnalysis
    ranked: list[ScoredEntry]
    text: str
    filenames: list[str]

    def as_prompt(self) -> str:
        if not self.ranked:
            return "No relevant document content found for this query."
        parts = ["RELEVANT DOCUMENT EXCERPTS:", ""]
        for hit in self.ranked:
            parts.append(f"[Document: {hit.entry.filename}]")
            parts.append(hit.entry.content)
            parts.append("")
        return "\n".join(parts)


class AnswerGenerator(Protocol):
    def generate(self, bundle: ContextBundle) -> str: ...


class QueryEngine:
    def __init__(self, config: EngineConfig | None = None, registry: IndexRegistry | None = None) -> None:
        self.config = config or EngineConfig()
        self.registry = registry or IndexRegistry(self._new_index)
        self.chunker = SentenceWindowChunker(
            chunk_size=self.config.chunk_size,
            overlap_sentences=self.config.overlap_sentences,
        )
        self._documents: dict[str, Document] = {}
        self._owner_docs: dict[str, list[str]] = {}
        self._lock = threading.RLock()

    def _new_index(self) -> SemanticIndex:
        return SemanticIndex(
            similarity_threshold=self.config.similarity_threshold,
            df_mode=self.config.df_mode,
        )

    # ---- documents ----

    def add_text(self, text: str, filename: str, owner_id: str = "default") -> Document:
        doc = build_document(
            text,
            filename,
            owner_id=owner_id,
            chunker=self.chunker,
            keyword_limit=self.config.keyword_limit,
        )
        self.index_document(doc)
        return doc

    def index_document(self, doc: Document) -> None:
        owner = str(doc.owner_id)
        with self._lock:
            if doc.id in self._documents:
                self.remove_document(doc.id)
            self.registry.get_or_create(owner).insert(doc)
            self._documents[doc.id] = doc
            self._owner_docs.setdefault(owner, []).append(doc.id)

    def remove_document(self, doc_id: str) -> bool:
        with self._lock:
            doc = self._documents.pop(doc_id, None)
            if doc is None:
                return False
            owner = str(doc.owner_id)
            ids = self._owner_docs.get(owner, [])
            if doc_id in ids:
                ids.remove(doc_id)
            if not ids:
                # last document gone: start the owner over with a fresh vocabulary
                self._owner_docs.pop(owner, None)
                self.registry.drop(owner)
                return True
            index = self.registry.get(owner)
            if index is not None:
                index.remove(doc_id)
            return True

    def clear_user_documents(self, owner_id: str) -> int:
        owner = str(owner_id)
        with self._lock:
            ids = self._owner_docs.pop(owner, [])
            for doc_id in ids:
                self._documents.pop(doc_id, None)
            self.registry.drop(owner)
        logger.info("Cleared %d documents for owner %s", len(ids), owner)
        return len(ids)

    def get_document(self, doc_id: str) -> Document | None:
        with self._lock:
            return self._documents.get(doc_id)

    def user_documents(self, owner_id: str) -> list[Document]:
        with self._lock:
            return [self._documents[i] for i in self._owner_docs.get(str(owner_id), [])]

    def stats(self, owner_id: str) -> IndexStats:
        index = self.registry.get(owner_id)
        if index is None:
            return IndexStats(document_count=0, chunk_count=0, vocabulary_size=0, dimension=0)
        return index.stats()

    def index_stats(self) -> EngineStats:
        """Totals across owners: documents held, per-owner counts and index stats."""
        with self._lock:
            counts = {owner: len(ids) for owner, ids in self._owner_docs.items()}
            total = len(self._documents)
        return EngineStats(
            total_documents=total,
            owner_counts=counts,
            indexes={owner: self.stats(owner) for owner in self.registry.owners()},
        )

    # ---- queries ----

    def search_documents(self, text: str, owner_id: str = "default", top_k: int = 10) -> list[Document]:
        """Documents of `owner_id` with at least one entry matching `text`, best match first."""
        index = self.registry.get(owner_id)
        if index is None:
            return []
        doc_ids = dedupe(h.entry.doc_id for h in index.search(text, top_k))
        with self._lock:
            return [self._documents[i] for i in doc_ids if i in self._documents]

    def _retrieve(self, text: str, owner_id: str, top_k: int | None) -> tuple[QueryAnalysis, list[ScoredEntry], int]:
        cfg = self.config
        analysis = analyze_query(text)
        index = self.registry.get(owner_id)
        k = cfg.search_top_k if top_k is None else top_k
        hits = index.search(text, k) if index is not None else []
        ranked = rerank_with_entities(
            hits,
            analysis.entities,
            min_chunk_chars=cfg.min_chunk_chars,
            threshold=cfg.similarity_threshold,
            boost=cfg.entity_boost,
            k=cfg.max_ranked,
        )
        return analysis, ranked, len(hits)

    def retrieve_context(self, text: str, owner_id: str, top_k: int | None = None) -> ContextBundle:
        analysis, ranked, _ = self._retrieve(text, owner_id, top_k)
        return ContextBundle(
            query=text,
            analysis=analysis,
            ranked=ranked,
            text=build_context(ranked),
            filenames=source_filenames(ranked),
        )

    def query(
        self,
        text: str,
        owner_id: str = "default",
        top_k: int | None = None,
        generator: AnswerGenerator | None = None,
    ) -> QueryResult:
        start = time.perf_counter()
        analysis, ranked, retrieved = self._retrieve(text, owner_id, top_k)

        answer = synthesize(analysis, ranked)
        generated = degraded = False
        if generator is not None and ranked:
            bundle = ContextBundle(
                query=text,
                analysis=analysis,
                ranked=ranked,
                text=build_context(ranked),
                filenames=source_filenames(ranked),
            )
            try:
                answer = generator.generate(bundle)
                generated = True
            except Exception:
                logger.warning("Answer generator failed; falling back to extractive answer", exc_info=True)
                degraded = True

        result = QueryResult(
            answer=answer,
            confidence=confidence_score(ranked, analysis.entities, answer),
            query_type=analysis.type.value,
            sources=self._sources(ranked),
            entities=list(analysis.entities),
            keywords=list(analysis.keywords),
            metadata=QueryMetadata(
                processing_ms=(time.perf_counter() - start) * 1000.0,
                documents_searched=len(self.user_documents(owner_id)),
                chunks_retrieved=retrieved,
            ),
            generated=generated,
            degraded=degraded,
        )
        logger.info(
            "Query owner=%s type=%s retrieved=%d ranked=%d confidence=%.2f",
            owner_id,
            result.query_type,
            retrieved,
            len(ranked),
            result.confidence,
        )
        return result

    def _sources(self, ranked: list[ScoredEntry]) -> list[Source]:
        cfg = self.config
        return [
            Source(
                doc_id=h.entry.doc_id,
                filename=h.entry.filename,
                content=excerpt(h.entry.content, cfg.excerpt_chars),
                relevance=min(max(h.similarity, 0.0), 1.0),
                chunk_index=h.entry.chunk_index,
            )
            for h in ranked[: cfg.max_sources]
        ]
