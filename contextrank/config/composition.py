"""Composition root: turns AppSettings into wired objects.

Adapters with heavy dependencies are imported inside their builders so that
building a ranking engine never loads an embedding model.
"""

from __future__ import annotations

from typing import Any

from contextrank.application.ports.embedding_port import EmbeddingPort
from contextrank.application.ports.telemetry_port import TelemetryPort
from contextrank.application.use_cases.rank_items import RankItems
from contextrank.application.use_cases.select_diverse_context import SelectDiverseContext
from contextrank.config.settings import AppSettings
from contextrank.domain.capabilities import RankingStrategy, ScoreNormalizer
from contextrank.domain.errors import ValidationError
from contextrank.domain.services.normalizers import (
    MinMaxNormalizer,
    PercentileNormalizer,
    ZScoreNormalizer,
)
from contextrank.domain.services.ranking import RankingEngine
from contextrank.domain.services.strategies import (
    HybridStrategy,
    ReciprocalRankFusionStrategy,
    WeightedSumStrategy,
)
from contextrank.infrastructure.telemetry.noop_telemetry import NoopTelemetry

NORMALIZERS = {
    "minmax": MinMaxNormalizer,
    "zscore": ZScoreNormalizer,
    "percentile": PercentileNormalizer,
}

STRATEGIES = ("weighted_sum", "rrf", "hybrid")


def build_normalizer(name: str) -> ScoreNormalizer:
    """Build a normalizer by its configuration name (minmax | zscore | percentile)."""
    try:
        return NORMALIZERS[name.lower()]()
    except KeyError:
        raise ValidationError(
            f"unknown normalizer '{name}', expected one of {sorted(NORMALIZERS)}"
        ) from None


def build_strategy(name: str, settings: AppSettings | None = None) -> RankingStrategy:
    """Build a combination strategy by name (weighted_sum | rrf | hybrid).

    RRF k and hybrid alpha come from settings (RANKING_RRF_K, RANKING_HYBRID_ALPHA).
    """
    settings = settings or AppSettings()
    key = name.lower()
    if key == "weighted_sum":
        return WeightedSumStrategy()
    if key == "rrf":
        return ReciprocalRankFusionStrategy(k=settings.rrf_k)
    if key == "hybrid":
        return HybridStrategy(alpha=settings.hybrid_alpha, rrf_k=settings.rrf_k)
    raise ValidationError(f"unknown strategy '{name}', expected one of {list(STRATEGIES)}")


def build_ranking_engine(settings: AppSettings | None = None) -> RankingEngine[Any]:
    settings = settings or AppSettings()
    return RankingEngine(
        default_normalizer=build_normalizer(settings.default_normalizer),
        default_strategy=build_strategy(settings.default_strategy, settings),
    )


def build_embedding(settings: AppSettings) -> EmbeddingPort:
    from contextrank.infrastructure.embeddings.sentence_transformers_adapter import (
        SentenceTransformersEmbeddingAdapter,
    )

    return SentenceTransformersEmbeddingAdapter(
        model_name=settings.embedding_model,
        device=settings.embedding_device,
    )


def build_telemetry(settings: AppSettings) -> TelemetryPort:
    """Build telemetry adapter based on settings.telemetry_enabled.

    Returns:
        OpenTelemetryAdapter, or NoopTelemetry if disabled
    """
    if not settings.telemetry_enabled:
        return NoopTelemetry()

    from contextrank.infrastructure.telemetry.otel_adapter import (
        OpenTelemetryAdapter,
        OtelConfig,
    )

    return OpenTelemetryAdapter(
        OtelConfig(
            service_name="contextrank",
            otlp_endpoint=settings.otlp_endpoint or None,
            environment=settings.telemetry_environment,
        )
    )


def build_rank_use_case(settings: AppSettings | None = None) -> RankItems:
    settings = settings or AppSettings()
    return RankItems(engine=build_ranking_engine(settings), telemetry=build_telemetry(settings))


def build_select_use_case(settings: AppSettings | None = None) -> SelectDiverseContext:
    settings = settings or AppSettings()
    return SelectDiverseContext(
        embedding=build_embedding(settings), telemetry=build_telemetry(settings)
    )
