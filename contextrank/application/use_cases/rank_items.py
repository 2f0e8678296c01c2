# contextrank/application/use_cases/rank_items.py
from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Any

from contextrank.application.dto.ranking_dto import RankRequest
from contextrank.application.ports.telemetry_port import TelemetryPort
from contextrank.domain.errors import DomainError, ScoringError
from contextrank.domain.models import RankedResult, WeightedScoringFunction
from contextrank.domain.services.ranking import RankingEngine
from contextrank.domain.types import Result

logger = logging.getLogger(__name__)


class _GuardedFunction:
    """Wraps a caller's scoring function so its failures surface as ScoringError."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner
        self.name = inner.name

    def score(self, item: Any) -> float:
        try:
            return self.inner.score(item)
        except DomainError:
            raise
        except Exception as ex:
            raise ScoringError(function_name=self.name, detail=str(ex)) from ex

    def score_batch(self, items: Sequence[Any]) -> list[float]:
        try:
            return self.inner.score_batch(items)
        except DomainError:
            raise
        except Exception as ex:
            raise ScoringError(function_name=self.name, detail=str(ex)) from ex


class RankItems:
    """
    Application use case: rank caller items through the ranking engine.
    Domain errors come back as Result.failure; nothing is raised to the caller.
    """

    def __init__(self, engine: RankingEngine[Any], telemetry: TelemetryPort | None = None) -> None:
        self.engine = engine
        self.telemetry = telemetry

    def execute(self, req: RankRequest) -> Result[list[RankedResult[Any]], DomainError]:
        started = time.perf_counter()
        guarded = [
            WeightedScoringFunction(_GuardedFunction(wf.function), wf.weight, wf.normalizer)
            for wf in req.scoring_functions or ()
        ]
        try:
            if req.top_k is None:
                ranked = self.engine.rank(req.items, guarded, req.strategy)
            else:
                ranked = self.engine.rank_top_k(req.items, guarded, req.top_k, req.strategy)
            result: Result[list[RankedResult[Any]], DomainError] = Result.success(ranked)
        except DomainError as err:
            logger.warning("ranking failed: %s", err)
            result = Result.failure(err)

        self._record(result, started)
        return result

    def _record(self, result: Result[list[RankedResult[Any]], DomainError], started: float) -> None:
        if self.telemetry is None:
            return
        status = "success" if result.ok else type(result.error).__name__
        self.telemetry.incr("contextrank.rank.requests", {"status": status})
        self.telemetry.observe(
            "contextrank.rank.latency_ms", (time.perf_counter() - started) * 1000.0, {}
        )
        if result.ok and result.value is not None:
            self.telemetry.observe("contextrank.rank.results", float(len(result.value)), {})
