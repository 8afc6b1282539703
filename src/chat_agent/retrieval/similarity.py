"""Vector similarity and top-K ranking over embedding vectors."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from math import sqrt
from typing import Any

from chat_agent.errors import DimensionMismatchError
from chat_agent.types import RankedItem

Candidate = tuple[str, Sequence[float], Any]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between `a` and `b`.

    Raises:
        DimensionMismatchError: if the vectors have different lengths.

    A zero-magnitude vector on either side yields 0.0.
    """

    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))
    numerator = sum(x * y for x, y in zip(a, b, strict=True))
    norm_a = sqrt(sum(x * x for x in a))
    norm_b = sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return numerator / (norm_a * norm_b)


def top_k_similar(
    query: Sequence[float],
    candidates: Iterable[Candidate],
    k: int,
) -> list[RankedItem]:
    """Rank `(id, vector, payload)` candidates by similarity to `query`.

    The sort is stable, so equally similar candidates keep their input order.
    """

    if k <= 0:
        return []
    scored = [
        RankedItem(id=item_id, similarity=cosine_similarity(query, vector), payload=payload)
        for item_id, vector, payload in candidates
    ]
    ranked = sorted(scored, key=lambda item: item.similarity, reverse=True)
    return ranked[:k]
