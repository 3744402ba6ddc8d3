"""Tests for cosine top-k selection."""
import numpy as np
import pytest

from docqa.index.retrieve import cosine_scores, topk_cosine


def test_topk_orders_by_score_and_applies_threshold():
    matrix = np.array(
        [
            [1.0, 0.0],
            [0.0, 1.0],
            [1.0, 1.0],
        ]
    )
    hits = topk_cosine(np.array([1.0, 0.0]), matrix, k=5, threshold=0.1)

    assert [h.idx for h in hits] == [0, 2]
    assert hits[0].score == pytest.approx(1.0)


def test_threshold_is_strict():
    matrix = np.array([[1.0, 0.0]])
    assert topk_cosine(np.array([1.0, 0.0]), matrix, threshold=1.0) == []


def test_ties_keep_row_order():
    matrix = np.array([[2.0, 0.0], [1.0, 0.0], [3.0, 0.0]])
    hits = topk_cosine(np.array([1.0, 0.0]), matrix, k=2)
    assert [h.idx for h in hits] == [0, 1]


def test_zero_vectors_score_zero():
    matrix = np.array([[0.0, 0.0], [1.0, 0.0]])
    assert cosine_scores(np.array([0.0, 0.0]), matrix).tolist() == [0.0, 0.0]
    assert topk_cosine(np.array([0.0, 0.0]), matrix) == []


def test_empty_matrix():
    assert cosine_scores(np.zeros(0), np.zeros((3, 0))).tolist() == [0.0, 0.0, 0.0]
    assert topk_cosine(np.array([1.0]), np.array([[1.0]]), k=0) == []
