"""HTTP API for selection and ranking.

Why: consumable API without business logic; pure delegation to the domain.
"""

from __future__ import annotations

from typing import Any

try:
    from fastapi import FastAPI, HTTPException
    from pydantic import BaseModel, Field
except ImportError as err:
    raise ImportError(
        "FastAPI not installed. Install with: pip install 'contextrank[http]'"
    ) from err

from contextrank.application.dto.ranking_dto import RankRequest
from contextrank.application.use_cases.rank_items import RankItems
from contextrank.config.composition import build_normalizer, build_rank_use_case, build_strategy
from contextrank.config.settings import AppSettings
from contextrank.domain.errors import DomainError, ValidationError
from contextrank.domain.models import WeightedScoringFunction
from contextrank.domain.services.mmr import compute_mmr
from contextrank.domain.services.scoring import FieldScoringFunction


# Pydantic models for request/response validation
class MMRRequestModel(BaseModel):
    """Request model for /v1/mmr endpoint."""

    query: list[float]
    vectors: list[list[float]]
    lambda_mult: float | None = None  # settings.mmr_lambda when omitted
    top_k: int | None = None


class MMRResponseModel(BaseModel):
    """Response model for /v1/mmr endpoint."""

    indices: list[int]


class FunctionModel(BaseModel):
    """One weighted scoring function over a numeric item field."""

    name: str
    field: str
    weight: float = 1.0
    normalizer: str | None = None  # "minmax" | "zscore" | "percentile"
    default: float | None = None


class RankRequestModel(BaseModel):
    """Request model for /v1/rank endpoint."""

    items: list[dict[str, Any]]
    functions: list[FunctionModel] = Field(default_factory=list)
    strategy: str | None = None  # "weighted_sum" | "rrf" | "hybrid"
    top_k: int | None = None


class RankedItemModel(BaseModel):
    rank: int
    final_score: float
    scores: dict[str, float]
    item: dict[str, Any]


class RankResponseModel(BaseModel):
    """Response model for /v1/rank endpoint."""

    results: list[RankedItemModel]


def _to_http(err: DomainError) -> HTTPException:
    if isinstance(err, ValidationError):
        return HTTPException(status_code=422, detail=str(err))
    return HTTPException(status_code=500, detail=f"{type(err).__name__}: {err}")


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the FastAPI app; settings default to the environment."""
    settings = settings or AppSettings()
    app = FastAPI(title="contextrank API", version="0.1.0")
    rank_uc: RankItems = build_rank_use_case(settings)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/v1/mmr", response_model=MMRResponseModel)
    async def mmr(req: MMRRequestModel) -> MMRResponseModel:
        """Diversity-aware selection over caller-supplied embeddings.

        Omitting top_k selects every candidate; only the CLI falls back to MMR_TOP_K.

        Example:
            POST /v1/mmr
            {"query": [1, 0], "vectors": [[1, 0], [0.9, 0.1], [0, 1]], "top_k": 2}
        """
        lambda_mult = settings.mmr_lambda if req.lambda_mult is None else req.lambda_mult
        try:
            picked = compute_mmr(req.vectors, req.query, lambda_mult=lambda_mult, top_k=req.top_k)
        except DomainError as err:
            raise _to_http(err) from err
        return MMRResponseModel(indices=[i for i, _ in picked])

    @app.post("/v1/rank", response_model=RankResponseModel)
    async def rank(req: RankRequestModel) -> RankResponseModel:
        """Rank JSON items by weighted numeric fields.

        Example:
            POST /v1/rank
            {
                "items": [{"id": "a", "relevance": 0.9}, {"id": "b", "relevance": 0.4}],
                "functions": [{"name": "Relevance", "field": "relevance", "weight": 1.0}],
                "strategy": "weighted_sum"
            }
        """
        try:
            strategy = build_strategy(req.strategy, settings) if req.strategy else None
            functions = [
                WeightedScoringFunction(
                    FieldScoringFunction(f.name, f.field, default=f.default),
                    f.weight,
                    build_normalizer(f.normalizer) if f.normalizer else None,
                )
                for f in req.functions
            ]
        except DomainError as err:
            raise _to_http(err) from err

        try:
            ranked = rank_uc.execute(
                RankRequest(
                    items=req.items, scoring_functions=functions, strategy=strategy, top_k=req.top_k
                )
            ).unwrap()
        except DomainError as err:
            raise _to_http(err) from err

        return RankResponseModel(
            results=[
                RankedItemModel(
                    rank=r.rank,
                    final_score=r.final_score,
                    scores=dict(r.individual_scores),
                    item=r.item,
                )
                for r in ranked
            ]
        )

    return app


app = create_app()
