# contextrank/application/use_cases/select_diverse_context.py
from __future__ import annotations

import logging
import time

from contextrank.application.dto.selection_dto import SelectionRequest
from contextrank.application.ports.embedding_port import EmbeddingPort
from contextrank.application.ports.telemetry_port import TelemetryPort
from contextrank.domain.errors import DomainError, EmbeddingError, ValidationError
from contextrank.domain.models import SelectedPassage
from contextrank.domain.services.mmr import compute_mmr
from contextrank.domain.similarity import relevance
from contextrank.domain.types import Result

logger = logging.getLogger(__name__)


class SelectDiverseContext:
    """
    Application use case: embed a query and its candidate passages, then keep
    a relevant but non-redundant subset via MMR.
    No I/O of its own, uses only ports; handles errors via Result[T, E].
    """

    def __init__(self, embedding: EmbeddingPort, telemetry: TelemetryPort | None = None) -> None:
        self.embedding = embedding
        self.telemetry = telemetry

    def execute(self, req: SelectionRequest) -> Result[list[SelectedPassage], DomainError]:
        started = time.perf_counter()
        result = self._run(req)
        self._record(result, started)
        return result

    def _run(self, req: SelectionRequest) -> Result[list[SelectedPassage], DomainError]:
        # 1) Validate
        if not req.query or not req.query.strip():
            return Result.failure(ValidationError("query must not be empty"))
        if not req.passages:
            return Result.success([])

        # 2) Embed query and passages
        try:
            q_vec = self.embedding.embed_query(req.query)
            vectors = self.embedding.embed_texts(req.passages)
        except Exception as ex:
            logger.warning("embedding failed: %s", ex)
            return Result.failure(EmbeddingError(f"embedding failed: {ex}"))

        if len(vectors) != len(req.passages):
            return Result.failure(
                EmbeddingError(f"expected {len(req.passages)} embeddings, got {len(vectors)}")
            )

        # 3) MMR selection
        try:
            picked = compute_mmr(vectors, q_vec, lambda_mult=req.lambda_mult, top_k=req.top_k)
        except DomainError as err:
            logger.warning("selection rejected: %s", err)
            return Result.failure(err)

        return Result.success(
            [
                SelectedPassage(index=i, text=req.passages[i], relevance=relevance(vec, q_vec))
                for i, vec in picked
            ]
        )

    def _record(self, result: Result[list[SelectedPassage], DomainError], started: float) -> None:
        if self.telemetry is None:
            return
        status = "success" if result.ok else type(result.error).__name__
        self.telemetry.incr("contextrank.mmr.requests", {"status": status})
        self.telemetry.observe(
            "contextrank.mmr.latency_ms", (time.perf_counter() - started) * 1000.0, {}
        )
        if result.ok and result.value is not None:
            self.telemetry.observe("contextrank.mmr.results", float(len(result.value)), {})
