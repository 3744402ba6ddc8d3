from __future__ import annotations

from typing import Sequence

from ..index.semantic import ScoredEntry

BASE = 0.5
SIMILARITY_WEIGHT = 0.3
ENTITY_WEIGHT = 0.2
LENGTH_BONUS = 0.1
LENGTH_BONUS_MIN_CHARS = 100
FLOOR = 0.1
CEILING = 0.95

NOT_FOUND_PHRASE = "couldn't find"


def confidence_score(ranked: Sequence[ScoredEntry], entities: Sequence[str], answer: str) -> float:
    """Presentation hint in [0.1, 0.95]; has no effect on ranking."""
    if not ranked:
        return FLOOR

    mean_sim = sum(h.similarity for h in ranked) / len(ranked)
    score = BASE + SIMILARITY_WEIGHT * min(max(mean_sim, 0.0), 1.0)

    if entities:
        lowered = answer.lower()
        found = sum(1 for ent in entities if ent.lower() in lowered)
        score += ENTITY_WEIGHT * found / len(entities)

    if len(answer) > LENGTH_BONUS_MIN_CHARS and NOT_FOUND_PHRASE not in answer.lower():
        score += LENGTH_BONUS

    return min(max(score, FLOOR), CEILING)
