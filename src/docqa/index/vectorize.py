from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping

import numpy as np


_re_word = re.compile(r"\w+")

KEYWORD_BOOST = 1.5
INJECTED_KEYWORD_WEIGHT = 0.5


def tokenize(text: str) -> Iterator[str]:
    """Yield lower-cased, purely alphabetic tokens longer than 2 characters."""
    for m in _re_word.finditer(text.lower()):
        tok = m.group(0)
        if len(tok) > 2 and tok.isascii() and tok.isalpha():
            yield tok


def term_frequency(tokens: Iterable[str]) -> dict[str, float]:
    counts: dict[str, int] = {}
    total = 0
    for tok in tokens:
        counts[tok] = counts.get(tok, 0) + 1
        total += 1
    if not total:
        return {}
    return {term: c / total for term, c in counts.items()}


def pad(vector: np.ndarray, size: int) -> np.ndarray:
    """Zero-pad a vector built at an older vocabulary size."""
    if vector.shape[0] >= size:
        return vector[:size]
    return np.pad(vector, (0, size - vector.shape[0]))


class Vocabulary:
    """Append-only term -> dimension mapping."""

    def __init__(self) -> None:
        self._index: dict[str, int] = {}

    def add(self, term: str) -> int:
        idx = self._index.get(term)
        if idx is None:
            idx = len(self._index)
            self._index[term] = idx
        return idx

    def get(self, term: str) -> int | None:
        return self._index.get(term)

    def terms(self) -> list[str]:
        return list(self._index)

    @property
    def dimension(self) -> int:
        return len(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, term: object) -> bool:
        return term in self._index


@dataclass
class IdfTable:
    scores: dict[str, float] = field(default_factory=dict)

    def get(self, term: str) -> float:
        # Terms never seen by a recomputation pass weigh 1.
        return self.scores.get(term, 1.0)

    def replace(self, scores: Mapping[str, float]) -> None:
        self.scores = dict(scores)

    def clear(self) -> None:
        self.scores.clear()


@dataclass
class TfidfVectorizer:
    """TF-IDF vectorizer over a shared, growing vocabulary.

    Vectors are dense and sized to the vocabulary at call time, so a vector
    built earlier is a prefix of the same vector built later. Compare vectors
    only after padding them to a common size (see `pad`).
    """

    vocabulary: Vocabulary = field(default_factory=Vocabulary)
    idf: IdfTable = field(default_factory=IdfTable)

    def term_weights(self, text: str, keywords: Iterable[str] = ()) -> dict[str, float]:
        weights = term_frequency(tokenize(text))
        for kw in keywords:
            kw = kw.lower().strip()
            if not kw:
                continue
            if kw in weights:
                weights[kw] *= KEYWORD_BOOST
            else:
                weights[kw] = INJECTED_KEYWORD_WEIGHT
        return weights

    def weights_to_vector(self, weights: Mapping[str, float]) -> np.ndarray:
        vec = np.zeros(self.vocabulary.dimension, dtype=np.float64)
        for term, tf in weights.items():
            idx = self.vocabulary.get(term)
            if idx is not None:
                vec[idx] = tf * self.idf.get(term)
        return vec

    def encode(
        self, text: str, keywords: Iterable[str] = (), register: bool = True
    ) -> tuple[dict[str, float], np.ndarray]:
        """Term weights and TF-IDF vector for `text`.

        With `register=False` the vocabulary is read-only: unseen terms are
        dropped instead of growing the dimensionality (used for queries).
        """
        weights = self.term_weights(text, keywords)
        if register:
            for term in weights:
                self.vocabulary.add(term)
        return weights, self.weights_to_vector(weights)

    def vectorize(self, text: str, keywords: Iterable[str] = (), register: bool = True) -> np.ndarray:
        return self.encode(text, keywords, register=register)[1]
