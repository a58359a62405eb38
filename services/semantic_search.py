"""
Cosine-similarity ranking over stored prompt embeddings.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

import numpy as np

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ScoredItem(Generic[T]):
    item: T
    score: float


def _unit(vector: Sequence[float]) -> np.ndarray | None:
    try:
        arr = np.asarray(vector, dtype="float32")
    except (TypeError, ValueError):
        return None
    if arr.ndim != 1 or arr.size == 0:
        return None
    norm = np.linalg.norm(arr)
    if norm == 0:
        return None
    return arr / norm


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0.0 for empty, zero or mismatched ones."""
    ua, ub = _unit(a), _unit(b)
    if ua is None or ub is None or ua.shape != ub.shape:
        return 0.0
    return float(ua @ ub)


def rank_by_similarity(
    query: Sequence[float],
    items: Sequence[T],
    vectors: Sequence[Sequence[float] | None],
    threshold: float = 0.3,
) -> list[ScoredItem[T]]:
    """
    Score items against a query vector.

    Items whose vector is missing or malformed are skipped. Only scores
    strictly above `threshold` are kept, best first.
    """
    query_unit = _unit(query)
    if query_unit is None:
        return []

    scored = []
    for item, vector in zip(items, vectors):
        if vector is None:
            continue
        unit = _unit(vector)
        if unit is None or unit.shape != query_unit.shape:
            logger.debug("Skipping malformed embedding")
            continue
        score = float(unit @ query_unit)
        if score > threshold:
            scored.append(ScoredItem(item=item, score=score))

    scored.sort(key=lambda s: s.score, reverse=True)
    return scored
