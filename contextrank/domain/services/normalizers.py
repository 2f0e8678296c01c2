"""Pure domain score normalizers.

Why: scores coming from different scoring functions live on different scales;
each function's batch is rescaled on its own before strategies combine them.

Functions:
- minmax_normalize: Scale scores linearly to [0,1] range
- zscore_normalize: Center on the mean, scale by population standard deviation
- percentile_normalize: Fractional rank of each score among the batch

Each has a matching normalizer class exposing ``name`` and ``normalize`` so
it can be passed to the ranking engine.
"""

from __future__ import annotations

import math
from bisect import bisect_left
from collections.abc import Sequence

from contextrank.domain.errors import ValidationError

# Spreads below this are treated as "all scores equal".
EPSILON = 1e-10


def _require(scores: Sequence[float] | None) -> Sequence[float]:
    if scores is None:
        raise ValidationError("scores must not be None")
    return scores


def minmax_normalize(scores: Sequence[float]) -> list[float]:
    """Pure function: scales scores linearly to [0,1].

    Args:
        scores: Raw scores to normalize

    Returns:
        Normalized scores in [0,1] range. Empty input returns empty list.
        All equal scores (spread below 1e-10) return 0.5 for each (midpoint).

    Examples:
        >>> minmax_normalize([1.0, 2.0, 3.0])
        [0.0, 0.5, 1.0]
        >>> minmax_normalize([5.0, 5.0])
        [0.5, 0.5]
        >>> minmax_normalize([])
        []
    """
    scores = _require(scores)
    if len(scores) == 0:
        return []
    lo, hi = min(scores), max(scores)
    spread = hi - lo
    if abs(spread) < EPSILON:
        return [0.5] * len(scores)
    if math.isinf(spread):
        # finite bounds more than float max apart; halving keeps every term finite
        half = hi / 2 - lo / 2
        return [(s / 2 - lo / 2) / half for s in scores]
    return [(s - lo) / spread for s in scores]


def zscore_normalize(scores: Sequence[float]) -> list[float]:
    """Normalize scores using z-score normalization.

    Uses the population standard deviation (divides by n, not n - 1).

    Args:
        scores: List of scores to normalize

    Returns:
        Z-score normalized scores; 0.0 for every element when the standard
        deviation is below 1e-10 (this covers a single score).
    """
    scores = _require(scores)
    if len(scores) == 0:
        return []
    mu = sum(scores) / len(scores)
    var = sum((s - mu) ** 2 for s in scores) / len(scores)
    std = math.sqrt(var)
    if abs(std) < EPSILON:
        return [0.0] * len(scores)
    return [(s - mu) / std for s in scores]


def percentile_normalize(scores: Sequence[float]) -> list[float]:
    """Map each score to its fractional rank among the batch, in [0,1].

    Equal scores (within 1e-10) share the rank of the first equal element in
    sorted order. A single score maps to 0.5; otherwise ``rank / (n - 1)``.

    Examples:
        >>> percentile_normalize([10.0, 30.0, 20.0])
        [0.0, 1.0, 0.5]
        >>> percentile_normalize([1.0, 1.0, 2.0])
        [0.0, 0.0, 1.0]
    """
    scores = _require(scores)
    n = len(scores)
    if n == 0:
        return []
    if n == 1:
        return [0.5]

    ordered = sorted(scores)
    out: list[float] = []
    for s in scores:
        rank = bisect_left(ordered, s)
        while rank > 0 and abs(ordered[rank - 1] - s) < EPSILON:
            rank -= 1
        out.append(rank / (n - 1))
    return out


class MinMaxNormalizer:
    """Linear ``[min, max] -> [0, 1]``; degenerate batches map to 0.5."""

    name = "MinMax"

    def normalize(self, scores: Sequence[float]) -> list[float]:
        return minmax_normalize(scores)


class ZScoreNormalizer:
    """``(x - mean) / std``; degenerate batches map to 0.0."""

    name = "ZScore"

    def normalize(self, scores: Sequence[float]) -> list[float]:
        return zscore_normalize(scores)


class PercentileNormalizer:
    """Fractional rank in [0, 1]; ties share the lowest rank."""

    name = "Percentile"

    def normalize(self, scores: Sequence[float]) -> list[float]:
        return percentile_normalize(scores)
