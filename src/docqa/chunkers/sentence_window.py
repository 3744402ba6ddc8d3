from __future__ import annotations

from dataclasses import dataclass

from ..clean import Sentence, count_words, split_sentences
from .base import Chunk, chunk_id_for


@dataclass
class SentenceWindowChunker:
    """Sentence-aligned chunker with a sentence overlap window.

    Algorithm:
      1) Split the text into sentence-like units (with offsets).
      2) Greedily add sentences until the next one would push the chunk past
         `chunk_size` words.
      3) Start the next chunk with the last `overlap_sentences` sentences of the
         chunk just emitted, so context survives the cut.

    The last chunk may be shorter than `chunk_size`. A single sentence longer
    than `chunk_size` becomes its own (oversized) chunk rather than being cut.
    """

    chunk_size: int = 500
    overlap_sentences: int = 2

    def chunk(self, doc_id: str, text: str) -> list[Chunk]:
        if not text or not text.strip():
            return []

        sentences = split_sentences(text)
        if not sentences:
            # Unsegmentable input: keep it whole.
            return [
                Chunk(
                    chunk_id=chunk_id_for(doc_id, 0),
                    doc_id=doc_id,
                    ordinal=0,
                    text=text.strip(),
                    word_count=count_words(text),
                    start=0,
                    end=len(text),
                )
            ]

        chunks: list[Chunk] = []
        current: list[Sentence] = []
        current_words = 0
        new_in_current = 0

        def flush() -> None:
            chunks.append(self._make_chunk(doc_id, len(chunks), text, current))

        for i, sent in enumerate(sentences):
            words = count_words(sent.text)

            if current and new_in_current and current_words + words > self.chunk_size:
                flush()
                keep = max(0, self.overlap_sentences)
                current = list(sentences[max(0, i - keep) : i]) if keep else []
                current_words = sum(count_words(s.text) for s in current)
                new_in_current = 0

            current.append(sent)
            current_words += words
            new_in_current += 1

        if current and new_in_current:
            flush()

        return chunks

    @staticmethod
    def _make_chunk(doc_id: str, ordinal: int, text: str, sentences: list[Sentence]) -> Chunk:
        # Sentences are contiguous, so slice the source to keep line structure.
        body = text[sentences[0].start : sentences[-1].end]
        return Chunk(
            chunk_id=chunk_id_for(doc_id, ordinal),
            doc_id=doc_id,
            ordinal=ordinal,
            text=body,
            word_count=count_words(body),
            start=sentences[0].start,
            end=sentences[-1].end,
        )
