# contextrank/domain/services/ranking.py
# Pure domain service: no I/O, deterministic, no external libraries.
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from contextrank.domain.capabilities import RankingStrategy, ScoreNormalizer
from contextrank.domain.errors import ValidationError
from contextrank.domain.models import RankedResult, RankingContext, WeightedScoringFunction
from contextrank.domain.services.normalizers import MinMaxNormalizer
from contextrank.domain.services.strategies import WeightedSumStrategy

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RankingEngine(Generic[T]):
    """Multi-signal ranking: score -> normalize -> combine -> sort.

    The engine never inspects items; it only hands them to the scoring
    functions. Nothing is cached between calls, so one engine can be shared.
    """

    def __init__(
        self,
        default_normalizer: ScoreNormalizer | None = None,
        default_strategy: RankingStrategy | None = None,
        parameters: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize with defaults used when a call does not override them.

        Args:
            default_normalizer: Normalizer for functions without their own (MinMax if None)
            default_strategy: Strategy used when rank() gets none (WeightedSum if None)
            parameters: Extension values copied into every RankingContext
        """
        self.default_normalizer: ScoreNormalizer = default_normalizer or MinMaxNormalizer()
        self.default_strategy: RankingStrategy = default_strategy or WeightedSumStrategy()
        self.parameters: Mapping[str, Any] = dict(parameters or {})

    def rank(
        self,
        items: Sequence[T] | None,
        scoring_functions: Sequence[WeightedScoringFunction[T]] | None,
        strategy: RankingStrategy | None = None,
    ) -> list[RankedResult[T]]:
        """Rank items by the weighted combination of several scoring functions.

        Args:
            items: Items to rank (any type)
            scoring_functions: Weighted functions; at least one is required
            strategy: Overrides the engine's default strategy for this call

        Returns:
            Results sorted by final_score descending with ranks 1..n. Equal
            final scores keep input order. ``individual_scores`` holds the
            raw, not normalized, score of each function.

        Raises:
            ValidationError: If no scoring function is given, or a function's
                batch does not hold one score per item
        """
        if not items:
            return []
        if not scoring_functions:
            raise ValidationError("At least one scoring function is required")

        active = strategy or self.default_strategy
        n = len(items)

        raw_columns: list[list[float]] = []
        norm_columns: list[list[float]] = []
        for wf in scoring_functions:
            raw = list(wf.function.score_batch(items))
            if len(raw) != n:
                raise ValidationError(
                    f"Scoring function '{wf.name}' returned {len(raw)} scores for {n} items"
                )
            normalizer = wf.normalizer or self.default_normalizer
            raw_columns.append(raw)
            norm_columns.append(normalizer.normalize(raw))

        weights = [wf.weight for wf in scoring_functions]
        names = [wf.name for wf in scoring_functions]
        # read-only per-call snapshot; strategies cannot alter engine state
        params = MappingProxyType(dict(self.parameters))
        base_ctx = RankingContext(total_items=n, parameters=params)

        results: list[RankedResult[T]] = []
        for i, item in enumerate(items):
            item_scores = [col[i] for col in norm_columns]
            ctx = replace(base_ctx, current_index=i)
            final = active.combine(item_scores, weights, ctx)
            individual = {name: col[i] for name, col in zip(names, raw_columns)}
            results.append(RankedResult(item=item, final_score=final, individual_scores=individual))

        # list.sort is stable: ties keep input order
        results.sort(key=lambda r: r.final_score, reverse=True)
        for pos, r in enumerate(results, start=1):
            r.rank = pos

        logger.debug(
            "rank: %d items, %d functions, strategy=%s", n, len(scoring_functions), active.name
        )
        return results

    def rank_top_k(
        self,
        items: Sequence[T] | None,
        scoring_functions: Sequence[WeightedScoringFunction[T]] | None,
        k: int,
        strategy: RankingStrategy | None = None,
    ) -> list[RankedResult[T]]:
        """Rank everything, then keep the first k results (no pruning)."""
        if k <= 0:
            return []
        return self.rank(items, scoring_functions, strategy)[:k]
