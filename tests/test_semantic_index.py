"""Tests for the in-memory semantic index."""
import math
import threading

import numpy as np
import pytest

from docqa.chunkers.sentence_window import SentenceWindowChunker
from docqa.documents import build_document
from docqa.index.semantic import CHUNK, DOCUMENT, IndexEntry, SemanticIndex
from docqa.index.vectorize import tokenize

LONG_TEXT = " ".join(
    f"Clause {i} explains how the insurance policy handles claim number {i} in detail."
    for i in range(12)
)


@pytest.fixture
def long_doc():
    """A document split into several chunks."""
    return build_document(
        LONG_TEXT,
        "policy.txt",
        doc_id="policy",
        chunker=SentenceWindowChunker(chunk_size=40, overlap_sentences=2),
    )


def test_search_on_empty_index(index):
    assert index.search("anything") == []
    assert index.stats().document_count == 0


def test_insert_adds_document_and_chunks(index, long_doc):
    index.insert(long_doc)
    stats = index.stats()

    assert stats.document_count == 1
    assert stats.chunk_count == len(long_doc.chunks) > 1
    assert long_doc.id in index
    assert index.get(long_doc.id).kind == DOCUMENT
    assert index.get(long_doc.chunks[0].chunk_id).kind == CHUNK


def test_blank_document_is_still_indexed(index):
    index.insert(build_document("  ", "blank.txt", doc_id="blank"))

    stats = index.stats()
    assert (stats.document_count, stats.chunk_count) == (1, 0)
    assert index.search("anything") == []


def test_insert_then_remove_restores_counts(index, report_docs):
    doc_a, doc_b = report_docs
    index.insert(doc_a)
    before = index.stats()

    index.insert(doc_b)
    assert index.remove(doc_b.id) == 1 + len(doc_b.chunks)

    after = index.stats()
    assert (after.document_count, after.chunk_count) == (before.document_count, before.chunk_count)
    assert all(h.entry.doc_id != doc_b.id for h in index.search("staffing hiring region"))


def test_remove_unknown_is_noop(index, report_docs):
    index.insert(report_docs[0])
    assert index.remove("missing") == 0
    assert len(index) == 1 + len(report_docs[0].chunks)


def test_reinsert_replaces_entries(index, report_docs):
    doc_a = report_docs[0]
    index.insert(doc_a)
    index.insert(doc_a)
    assert index.stats().document_count == 1


def test_search_respects_k_and_threshold(index, long_doc, report_docs):
    for doc in (long_doc, *report_docs):
        index.insert(doc)

    hits = index.search("insurance policy claim", top_k=3)
    assert 0 < len(hits) <= 3
    assert all(h.similarity > 0.1 for h in hits)
    assert [h.similarity for h in hits] == sorted((h.similarity for h in hits), reverse=True)


def test_search_is_idempotent(index, report_docs):
    for doc in report_docs:
        index.insert(doc)

    first = [(h.entry.id, h.similarity) for h in index.search("budget planning")]
    second = [(h.entry.id, h.similarity) for h in index.search("budget planning")]
    assert first == second


def test_budget_query_ranks_report_a_only(index, report_docs):
    for doc in report_docs:
        index.insert(doc)

    hits = index.search("budget", top_k=10)
    assert hits
    assert {h.entry.doc_id for h in hits} == {"report_a"}


def test_unknown_terms_give_no_results(index, report_docs):
    for doc in report_docs:
        index.insert(doc)

    before = index.stats().vocabulary_size
    assert index.search("zzzqqq xylophone") == []
    assert index.stats().vocabulary_size == before


def test_find_similar_never_returns_itself(index, long_doc):
    index.insert(long_doc)

    for chunk in long_doc.chunks:
        similar = index.find_similar(chunk.chunk_id, top_k=5)
        assert chunk.chunk_id not in {h.entry.id for h in similar}
    assert index.find_similar("missing") == []


def test_all_vectors_track_vocabulary_size(index, long_doc, report_docs):
    index.insert(report_docs[0])
    index.insert(long_doc)
    index.insert(report_docs[1])

    dim = index.stats().dimension
    assert all(e.vector.shape == (dim,) for e in index.entries())


def test_idf_uses_entry_count_and_document_frequency(index, report_docs):
    for doc in report_docs:
        index.insert(doc)

    # four entries; "budget" appears in Report A's document and its chunk only
    assert len(index) == 4
    assert index.idf("budget") == pytest.approx(math.log(4 / 3))


@pytest.mark.parametrize(
    "df_mode, expected",
    [
        ("substring", math.log(4 / 5)),
        ("token", math.log(4 / 3)),
    ],
)
def test_df_mode(df_mode, expected):
    index = SemanticIndex(df_mode=df_mode)
    index.insert(build_document("Category listing for the shop.", "a.txt", doc_id="a"))
    index.insert(build_document("The cat sat quietly.", "b.txt", doc_id="b"))

    assert index.idf("cat") == pytest.approx(expected)


def test_unknown_df_mode_is_rejected():
    with pytest.raises(ValueError):
        SemanticIndex(df_mode="fuzzy")


def test_drop_forgets_everything(index, report_docs):
    for doc in report_docs:
        index.insert(doc)
    index.drop()

    stats = index.stats()
    assert (stats.document_count, stats.chunk_count, stats.vocabulary_size) == (0, 0, 0)
    assert index.search("budget") == []


def test_concurrent_inserts(index):
    def worker(n: int) -> None:
        for i in range(5):
            doc_id = f"w{n}_{i}"
            index.insert(build_document(f"Worker {n} wrote note {i} about shipping.", f"{doc_id}.txt", doc_id=doc_id))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert index.stats().document_count == 20


def test_entry_caches_are_derived_from_content(index, report_docs):
    index.insert(report_docs[0])
    entry = index.get("report_a")

    assert entry._terms == frozenset(tokenize(entry.content))
    assert entry.weights["budget"] > entry.weights["reviews"]
    with pytest.raises(TypeError):
        IndexEntry(
            id="x",
            doc_id="x",
            filename="x.txt",
            kind=CHUNK,
            content="fresh text",
            weights={},
            vector=np.zeros(0),
            _lowered="stale text",
        )
