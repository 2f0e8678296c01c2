"""Pure domain strategies that merge one item's weighted scores into a scalar.

- WeightedSumStrategy: sum of score * weight
- ReciprocalRankFusionStrategy: sum of weight / (k + pseudo_rank)
- HybridStrategy: alpha-blend of the two; falls back to weighted sum without context
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from contextrank.domain.errors import ValidationError
from contextrank.domain.models import RankingContext

DEFAULT_RRF_K = 60.0


def _check_lengths(scores: Sequence[float] | None, weights: Sequence[float] | None) -> None:
    if scores is None:
        raise ValidationError("scores must not be None")
    if weights is None:
        raise ValidationError("weights must not be None")
    if len(scores) != len(weights):
        raise ValidationError(
            f"Scores and weights must have same count ({len(scores)} != {len(weights)})"
        )


class WeightedSumStrategy:
    """Linear combination; the context is ignored."""

    name = "WeightedSum"

    def combine(
        self,
        scores: Sequence[float] | None,
        weights: Sequence[float] | None,
        context: RankingContext | None = None,
    ) -> float:
        _check_lengths(scores, weights)
        assert scores is not None and weights is not None
        return sum(s * w for s, w in zip(scores, weights))


class ReciprocalRankFusionStrategy:
    """Reciprocal Rank Fusion over normalized scores.

    Each score (assumed already in [0, 1]) becomes a pseudo-rank
    ``max(1, total - floor(score * (total - 1)))`` so the best score sits at
    rank 1; the item's value is ``sum(weight / (k + rank))``.
    """

    name = "RRF"

    def __init__(self, k: float = DEFAULT_RRF_K) -> None:
        if not k > 0:
            raise ValidationError(f"RRF k must be > 0, but was {k}")
        self.k = float(k)

    def combine(
        self,
        scores: Sequence[float] | None,
        weights: Sequence[float] | None,
        context: RankingContext | None = None,
    ) -> float:
        _check_lengths(scores, weights)
        if context is None:
            raise ValidationError("RRF strategy requires context with total_items")
        assert scores is not None and weights is not None

        total = context.total_items
        fused = 0.0
        for s, w in zip(scores, weights):
            rank = max(1, total - math.floor(s * (total - 1)))
            fused += w / (self.k + rank)
        return fused


class HybridStrategy:
    """``alpha * weighted_sum + (1 - alpha) * rrf``.

    alpha is clamped to [0, 1]. Without a context only the weighted sum is
    computed; this is the one strategy that tolerates a missing context.
    """

    name = "Hybrid"

    def __init__(self, alpha: float = 0.5, rrf_k: float = DEFAULT_RRF_K) -> None:
        self.alpha = max(0.0, min(1.0, alpha))
        self._weighted_sum = WeightedSumStrategy()
        self._rrf = ReciprocalRankFusionStrategy(rrf_k)

    def combine(
        self,
        scores: Sequence[float] | None,
        weights: Sequence[float] | None,
        context: RankingContext | None = None,
    ) -> float:
        ws = self._weighted_sum.combine(scores, weights, context)
        if context is None:
            return ws
        rrf = self._rrf.combine(scores, weights, context)
        return self.alpha * ws + (1.0 - self.alpha) * rrf
