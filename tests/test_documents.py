"""Tests for document building and metadata."""
from docqa.chunkers.sentence_window import SentenceWindowChunker
from docqa.documents import Document, build_document, detect_language, extract_keywords, new_document_id


def test_build_document_fills_metadata():
    text = "The budget for the project is fixed.  The budget review happens in March."
    doc = build_document(text, "reports/q1.txt", owner_id=7)

    assert doc.id.startswith("q1_")
    assert doc.owner_id == "7"
    assert doc.filename == "reports/q1.txt"
    assert doc.text == "The budget for the project is fixed. The budget review happens in March."
    assert doc.metadata.word_count == 13
    assert doc.metadata.char_count == len(doc.text)
    assert doc.metadata.language == "english"
    assert doc.keywords[0] == "budget"
    assert [c.chunk_id for c in doc.chunks] == [f"{doc.id}_chunk_0"]


def test_build_document_with_explicit_id_and_chunker():
    text = " ".join(f"Sentence {i} has six words here." for i in range(6))
    doc = build_document(text, "a.txt", doc_id="fixed", chunker=SentenceWindowChunker(chunk_size=12, overlap_sentences=1))

    assert doc.id == "fixed"
    assert len(doc.chunks) > 1
    assert all(c.doc_id == "fixed" for c in doc.chunks)


def test_blank_document_has_no_chunks():
    doc = build_document("   \n  ", "empty.txt")
    assert doc.text == ""
    assert doc.chunks == []
    assert doc.metadata.language == "unknown"


def test_document_defaults_metadata():
    doc = Document(id="d", owner_id="o", filename="f.txt", text="two words")
    assert doc.metadata.word_count == 2
    assert doc.keywords == []


def test_extract_keywords_orders_by_frequency():
    text = "Planning review budget budget budget planning review planning budget"
    assert extract_keywords(text) == ["budget", "planning", "review"]
    assert extract_keywords(text, limit=1) == ["budget"]


def test_extract_keywords_drops_stopwords_and_short_terms():
    assert extract_keywords("the and which would cat dog elephant") == ["elephant"]


def test_detect_language():
    assert detect_language("The cat and the dog went to the park") == "english"
    assert detect_language("Lorem ipsum dolor sit amet") == "unknown"
    assert detect_language("") == "unknown"


def test_new_document_id_is_unique():
    assert new_document_id("x.pdf") != new_document_id("x.pdf")
    assert new_document_id("").startswith("document_")
