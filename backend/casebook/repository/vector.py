"""Vector similarity engine: cosine ranking over stored embeddings."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """dot(a, b) / (|a| * |b|).

    Mismatched lengths and zero-norm vectors score 0.0 instead of raising,
    so embeddings from an older model dimension never match.
    """
    if len(a) != len(b):
        return 0.0

    dot = norm_a = norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def rank_by_similarity(
    candidates: Iterable[T],
    query: Sequence[float],
    limit: int,
    embedding: Callable[[T], Sequence[float]] = lambda c: c.embedding,  # type: ignore[attr-defined]
    dimension: int | None = None,
) -> list[T]:
    """Return up to ``limit`` candidates, most similar first.

    Candidates without an embedding are excluded. The sort is stable, so
    equal scores keep the candidates' input order. ``limit`` larger than the
    candidate count returns everything; ``limit <= 0`` returns nothing.

    With ``dimension`` set, only embeddings of exactly that length are
    comparable: other candidates are skipped and a query of another length
    matches nothing.
    """
    if dimension is not None and len(query) != dimension:
        return []
    scored = [
        (cosine_similarity(query, embedding(c)), c)
        for c in candidates
        if len(embedding(c)) > 0 and (dimension is None or len(embedding(c)) == dimension)
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)

    if limit <= 0:
        return []
    return [c for _, c in scored[:limit]]
