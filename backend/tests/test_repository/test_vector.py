"""Tests for cosine similarity and embedding ranking."""

import math

from casebook.models import Knowledge
from casebook.repository.vector import cosine_similarity, rank_by_similarity


def test_identical_vectors_score_one():
    assert math.isclose(cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]), 1.0)


def test_orthogonal_and_opposite():
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
    assert math.isclose(cosine_similarity([1.0, 0.0], [-1.0, 0.0]), -1.0)


def test_length_mismatch_scores_zero():
    assert cosine_similarity([1.0, 0.0, 0.0], [1.0, 0.0]) == 0.0


def test_zero_norm_scores_zero():
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


def test_ranking_orders_by_similarity_and_skips_empty():
    near = Knowledge(id="near", embedding=[1.0, 0.1])
    far = Knowledge(id="far", embedding=[0.1, 1.0])
    empty = Knowledge(id="empty")

    ranked = rank_by_similarity([far, empty, near], [1.0, 0.0], 10)
    assert [k.id for k in ranked] == ["near", "far"]


def test_ranking_limit_is_clamped():
    items = [Knowledge(id=str(i), embedding=[1.0, float(i)]) for i in range(3)]
    assert len(rank_by_similarity(items, [1.0, 0.0], 2)) == 2
    assert len(rank_by_similarity(items, [1.0, 0.0], 100)) == 3
    assert rank_by_similarity(items, [1.0, 0.0], 0) == []


def test_ranking_no_candidates_returns_empty_list():
    assert rank_by_similarity([], [1.0], 5) == []
    assert rank_by_similarity([Knowledge(id="x")], [1.0], 5) == []


def test_ties_keep_input_order():
    items = [Knowledge(id=name, embedding=[1.0, 1.0]) for name in ("a", "b", "c")]
    assert [k.id for k in rank_by_similarity(items, [2.0, 2.0], 3)] == ["a", "b", "c"]


def test_dimension_skips_other_lengths():
    fits = Knowledge(id="fits", embedding=[0.0, 1.0, 0.0])
    legacy = Knowledge(id="legacy", embedding=[1.0, 0.0])

    assert rank_by_similarity([legacy, fits], [0.0, 1.0, 0.0], 10, dimension=3) == [fits]
    assert rank_by_similarity([legacy, fits], [1.0, 0.0], 10, dimension=3) == []
    assert [k.id for k in rank_by_similarity([legacy, fits], [0.0, 1.0, 0.0], 10)] == ["fits", "legacy"]
