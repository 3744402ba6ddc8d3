from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RetrievalMetrics:
    n: int
    hit_at_1: float
    hit_at_3: float
    hit_at_5: float
    mrr: float
    avg_first_rank: float
    miss_rate: float
    mean_confidence: float


def compute_metrics(first_ranks: list[int | None], confidences: list[float] | None = None) -> RetrievalMetrics:
    """Aggregate per-question first-correct ranks (1-based, None = miss)."""
    n = len(first_ranks)
    present = [r for r in first_ranks if r is not None]

    def hit_rate(k: int) -> float:
        return sum(1 for r in present if r <= k) / n if n else 0.0

    rr_sum = sum(1.0 / r for r in present)
    confidences = confidences or []

    return RetrievalMetrics(
        n=n,
        hit_at_1=hit_rate(1),
        hit_at_3=hit_rate(3),
        hit_at_5=hit_rate(5),
        mrr=rr_sum / n if n else 0.0,
        avg_first_rank=sum(present) / len(present) if present else float("inf"),
        miss_rate=(n - len(present)) / n if n else 0.0,
        mean_confidence=sum(confidences) / len(confidences) if confidences else 0.0,
    )
