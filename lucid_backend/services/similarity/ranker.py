"""Cosine-similarity ranking of candidate embeddings against a query vector.

Pure and exception-free for well-typed input: mismatched dimensionality and
zero-length vectors score 0.0 rather than raising.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Hashable, List, Optional, Sequence, TypeVar

DEFAULT_LIMIT = 5

M = TypeVar("M")


@dataclass(frozen=True)
class RankCandidate(Generic[M]):
    id: Hashable
    vector: Optional[Sequence[float]]
    metadata: M
    model: Optional[str] = None


@dataclass(frozen=True)
class RankedResult(Generic[M]):
    id: Hashable
    metadata: M
    similarity_score: float


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    denominator = math.sqrt(norm_a) * math.sqrt(norm_b)
    if denominator == 0:
        return 0.0
    # rounding can push |score| a hair past 1
    return max(-1.0, min(1.0, dot / denominator))


def rank_by_similarity(
    query: Sequence[float],
    candidates: Sequence[RankCandidate[Any]],
    limit: int = DEFAULT_LIMIT,
    model: Optional[str] = None,
) -> List[RankedResult[Any]]:
    """Return at most ``limit`` candidates ordered by descending similarity.

    Candidates without a vector are dropped before scoring. When ``model`` is
    given, candidates embedded by a different model are dropped as well since
    their vectors live in a different space. Exact ties keep input order.
    """
    if limit < 1:
        return []

    comparable = [
        c for c in candidates
        if c.vector is not None and (model is None or c.model is None or c.model == model)
    ]
    scored = [
        RankedResult(id=c.id, metadata=c.metadata, similarity_score=cosine_similarity(query, c.vector))
        for c in comparable
    ]
    scored.sort(key=lambda r: -r.similarity_score)
    return scored[:limit]
