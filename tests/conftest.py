"""Shared fixtures for docqa tests."""
from __future__ import annotations

import numpy as np
import pytest

from docqa.documents import build_document
from docqa.index.semantic import CHUNK, IndexEntry, ScoredEntry, SemanticIndex

REPORT_A = (
    "Report A reviews the budget. The budget grew this year. Budget planning matters. "
    "The budget committee met twice. A final budget was approved."
)
REPORT_B = "Report B covers staffing levels. Hiring continued across every region this year."


@pytest.fixture
def index() -> SemanticIndex:
    """An empty index with default settings."""
    return SemanticIndex()


@pytest.fixture
def report_docs():
    """Two documents: one about the budget, one that never mentions it."""
    return (
        build_document(REPORT_A, "report_a.txt", doc_id="report_a"),
        build_document(REPORT_B, "report_b.txt", doc_id="report_b"),
    )


@pytest.fixture
def make_hit():
    """Factory for scored entries built without an index."""

    def _make(
        content: str,
        similarity: float,
        kind: str = CHUNK,
        entry_id: str = "entry",
        filename: str = "a.txt",
        doc_id: str = "doc",
    ) -> ScoredEntry:
        entry = IndexEntry(
            id=entry_id,
            doc_id=doc_id,
            filename=filename,
            kind=kind,
            content=content,
            weights={},
            vector=np.zeros(1),
            chunk_index=0 if kind == CHUNK else None,
        )
        return ScoredEntry(entry=entry, similarity=similarity, score=similarity)

    return _make
