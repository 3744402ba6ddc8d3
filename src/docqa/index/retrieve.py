from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity


@dataclass
class RetrievalResult:
    idx: int
    score: float


def cosine_scores(query_vec: np.ndarray, doc_matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of one query against every row of `doc_matrix`.

    Zero-norm rows (or a zero query) score 0 rather than raising.
    """
    if doc_matrix.size == 0 or doc_matrix.shape[1] == 0:
        return np.zeros(doc_matrix.shape[0], dtype=np.float64)
    q = query_vec.reshape(1, -1)
    return cosine_similarity(q, doc_matrix)[0]


def topk_cosine(
    query_vec: np.ndarray,
    doc_matrix: np.ndarray,
    k: int = 5,
    threshold: float = 0.1,
) -> list[RetrievalResult]:
    """Return up to k rows scoring strictly above `threshold`, best first.

    The sort is stable, so equal scores keep row order (insertion order).
    """
    if k <= 0:
        return []
    sims = cosine_scores(query_vec, doc_matrix)
    keep = np.flatnonzero(sims > threshold)
    if keep.size == 0:
        return []
    order = keep[np.argsort(-sims[keep], kind="stable")][:k]
    return [RetrievalResult(idx=int(i), score=float(sims[i])) for i in order]
