"""Application settings with environment-driven configuration.

Why: single place that reads the environment; the domain never does.
"""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from environment variables.

    This is the ONLY place where environment variables are read.
    All other layers receive settings via the composition root.
    """

    # ===== Ranking Configuration =====
    default_normalizer: str = field(
        default_factory=lambda: os.getenv("RANKING_DEFAULT_NORMALIZER", "minmax").lower()
    )
    # Supported: "minmax" | "zscore" | "percentile"

    default_strategy: str = field(
        default_factory=lambda: os.getenv("RANKING_DEFAULT_STRATEGY", "weighted_sum").lower()
    )
    # Supported: "weighted_sum" | "rrf" | "hybrid"

    rrf_k: float = field(default_factory=lambda: float(os.getenv("RANKING_RRF_K", "60")))
    hybrid_alpha: float = field(
        default_factory=lambda: float(os.getenv("RANKING_HYBRID_ALPHA", "0.5"))
    )
    # Weight of the weighted sum inside the hybrid strategy (clamped to 0..1)

    # ===== Selection (MMR) Configuration =====
    mmr_lambda: float = field(default_factory=lambda: float(os.getenv("MMR_LAMBDA", "0.5")))
    # 1.0 = pure relevance, 0.0 = pure diversity

    mmr_top_k: int = field(default_factory=lambda: int(os.getenv("MMR_TOP_K", "5")))

    # ===== Embedding Configuration =====
    embedding_model: str = field(
        default_factory=lambda: os.getenv(
            "EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2"
        )
    )
    embedding_device: str = field(default_factory=lambda: os.getenv("EMBEDDING_DEVICE", "cpu"))
    # Supported: "cpu" | "cuda" | "mps"

    # ===== Telemetry Configuration =====
    telemetry_enabled: bool = field(
        default_factory=lambda: os.getenv("TELEMETRY_ENABLED", "false").lower() == "true"
    )
    otlp_endpoint: str = field(default_factory=lambda: os.getenv("OTLP_ENDPOINT", ""))
    # Empty string = no OTLP export

    telemetry_environment: str = field(
        default_factory=lambda: os.getenv("TELEMETRY_ENVIRONMENT", "production")
    )

    # ===== Logging =====
    log_level: str = field(
        default_factory=lambda: os.getenv("CONTEXTRANK_LOG_LEVEL", "WARNING").upper()
    )
