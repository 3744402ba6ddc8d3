"""Tests for the sentence-window chunker."""
import pytest

from docqa.chunkers.base import chunk_id_for
from docqa.chunkers.sentence_window import SentenceWindowChunker
from docqa.clean import split_sentences


def _ten_word_sentences(n: int) -> str:
    return " ".join(
        f"Sentence number {i} talks about topic alpha beta gamma delta." for i in range(n)
    )


@pytest.fixture
def chunker() -> SentenceWindowChunker:
    """Small chunk size so a short text yields several chunks."""
    return SentenceWindowChunker(chunk_size=50, overlap_sentences=2)


@pytest.mark.parametrize("text", ["", "   ", "\n\n"])
def test_blank_text_yields_no_chunks(chunker, text):
    assert chunker.chunk("doc", text) == []


def test_short_text_is_one_chunk():
    text = "Only a couple of words here. And one more sentence."
    chunks = SentenceWindowChunker().chunk("doc", text)

    assert len(chunks) == 1
    assert chunks[0].chunk_id == "doc_chunk_0"
    assert chunks[0].ordinal == 0
    assert chunks[0].text == text


def test_chunks_respect_word_budget(chunker):
    chunks = chunker.chunk("doc", _ten_word_sentences(30))

    assert len(chunks) > 1
    for chunk in chunks:
        assert chunk.word_count <= 50


def test_every_sentence_is_covered(chunker):
    text = _ten_word_sentences(30)
    chunks = chunker.chunk("doc", text)

    for sentence in split_sentences(text):
        assert any(sentence.text in c.text for c in chunks)


def test_consecutive_chunks_share_two_sentences(chunker):
    chunks = chunker.chunk("doc", _ten_word_sentences(30))

    for prev, nxt in zip(chunks, chunks[1:]):
        tail = [s.text for s in split_sentences(prev.text)][-2:]
        head = [s.text for s in split_sentences(nxt.text)][:2]
        assert tail == head


def test_chunk_ids_and_offsets(chunker):
    text = _ten_word_sentences(12)
    chunks = chunker.chunk("doc", text)

    for i, chunk in enumerate(chunks):
        assert chunk.chunk_id == chunk_id_for("doc", i)
        assert chunk.ordinal == i
        assert text[chunk.start : chunk.end] == chunk.text


def test_zero_overlap_partitions_sentences():
    chunker = SentenceWindowChunker(chunk_size=30, overlap_sentences=0)
    chunks = chunker.chunk("doc", _ten_word_sentences(10))

    assert [len(split_sentences(c.text)) for c in chunks] == [3, 3, 3, 1]


def test_oversized_sentences_still_terminate():
    chunker = SentenceWindowChunker(chunk_size=3, overlap_sentences=2)
    text = "One two three four five. Six seven eight nine ten. Alpha beta gamma delta eps. Zeta eta theta iota kappa."
    chunks = chunker.chunk("doc", text)

    assert len(chunks) == 4
    assert chunks[-1].text.endswith("Zeta eta theta iota kappa.")


def test_bullets_keep_line_structure():
    text = "Steps to follow:\n- Sign the contract\n- Collect the laptop"
    chunks = SentenceWindowChunker().chunk("doc", text)

    assert len(chunks) == 1
    assert chunks[0].text == text
