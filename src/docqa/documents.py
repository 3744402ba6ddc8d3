"""Document records handed to the index.

Text extraction from PDF/DOCX/HTML/email happens upstream; `build_document`
takes the decoded plain text and fills in what the index needs.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import PurePath

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from .chunkers.base import Chunk, Chunker
from .chunkers.sentence_window import SentenceWindowChunker
from .clean import count_words, normalize_text
from .index.vectorize import tokenize


_COMMON_ENGLISH = frozenset(
    ["the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"]
)


@dataclass
class DocumentMetadata:
    word_count: int
    char_count: int
    keywords: list[str] = field(default_factory=list)
    language: str = "unknown"


@dataclass
class Document:
    id: str
    owner_id: str
    filename: str
    text: str
    chunks: list[Chunk] = field(default_factory=list)
    metadata: DocumentMetadata | None = None

    def __post_init__(self) -> None:
        if self.metadata is None:
            self.metadata = DocumentMetadata(
                word_count=count_words(self.text),
                char_count=len(self.text),
            )

    @property
    def keywords(self) -> list[str]:
        return self.metadata.keywords if self.metadata else []


def extract_keywords(text: str, limit: int = 20) -> list[str]:
    """Most frequent non-stopword terms longer than 3 characters."""
    freq: dict[str, int] = {}
    for tok in tokenize(text):
        if len(tok) <= 3 or tok in ENGLISH_STOP_WORDS:
            continue
        freq[tok] = freq.get(tok, 0) + 1
    # sorted() is stable, so ties keep first-occurrence order
    ranked = sorted(freq.items(), key=lambda kv: -kv[1])
    return [term for term, _ in ranked[:limit]]


def detect_language(text: str) -> str:
    words = text.lower().split()[:100]
    if not words:
        return "unknown"
    hits = sum(1 for w in words if w in _COMMON_ENGLISH)
    return "english" if hits > len(words) * 0.1 else "unknown"


def new_document_id(filename: str) -> str:
    stem = PurePath(filename).stem or "document"
    return f"{stem}_{uuid.uuid4().hex[:12]}"


def build_document(
    text: str,
    filename: str,
    owner_id: str = "default",
    chunker: Chunker | None = None,
    doc_id: str | None = None,
    keyword_limit: int = 20,
) -> Document:
    cleaned = normalize_text(text or "")
    doc_id = doc_id or new_document_id(filename)
    chunker = chunker or SentenceWindowChunker()

    return Document(
        id=doc_id,
        owner_id=str(owner_id),
        filename=filename,
        text=cleaned,
        chunks=chunker.chunk(doc_id, cleaned),
        metadata=DocumentMetadata(
            word_count=count_words(cleaned),
            char_count=len(cleaned),
            keywords=extract_keywords(cleaned, limit=keyword_limit),
            language=detect_language(cleaned),
        ),
    )
