# contextrank/application/dto/ranking_dto.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from contextrank.domain.capabilities import RankingStrategy
from contextrank.domain.models import WeightedScoringFunction


@dataclass(frozen=True)
class RankRequest:
    """
    DTO for ranking items with several weighted signals.

    - items:             the caller's items (opaque to the engine)
    - scoring_functions: weighted scoring functions, at least one
    - strategy:          combination strategy override (engine default if None)
    - top_k:             truncate to the best k results (None keeps all)
    """

    items: Sequence[Any]
    scoring_functions: Sequence[WeightedScoringFunction[Any]] = field(default_factory=list)
    strategy: RankingStrategy | None = None
    top_k: int | None = None
