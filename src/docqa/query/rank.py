from __future__ import annotations

from typing import Iterable, Sequence

from ..index.semantic import CHUNK, ScoredEntry


def entity_matches(text: str, entities: Iterable[str]) -> int:
    lowered = text.lower()
    return sum(1 for ent in entities if ent and ent.lower() in lowered)


def rerank_with_entities(
    hits: Sequence[ScoredEntry],
    entities: Sequence[str],
    min_chunk_chars: int = 50,
    threshold: float = 0.1,
    boost: float = 0.1,
    k: int = 6,
) -> list[ScoredEntry]:
    """Filter weak/short hits and re-score by entity mentions.

    score = similarity + boost * (entities found in the content). The boost is
    additive, so it reorders near-ties but a fixed 0.1 per entity cannot close
    a wide similarity gap on its own.

    Short chunks are dropped; whole-document entries are kept regardless of
    length so a one-line document can still answer.
    """
    if k <= 0:
        return []

    kept: list[ScoredEntry] = []
    for hit in hits:
        if hit.entry.kind == CHUNK and len(hit.entry.content) < min_chunk_chars:
            continue
        if hit.similarity <= threshold:
            continue
        bonus = boost * entity_matches(hit.entry.content, entities)
        kept.append(ScoredEntry(entry=hit.entry, similarity=hit.similarity, score=hit.similarity + bonus))

    kept.sort(key=lambda h: -h.score)
    return kept[:k]
