# contextrank/domain/models.py
# Domain models must be pure (no I/O, no external libs)
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from contextrank.domain.capabilities import ScoreNormalizer, ScoringFunction

T = TypeVar("T")


@dataclass(frozen=True)
class WeightedScoringFunction(Generic[T]):
    """
    A scoring function paired with its weight in the final combination.

    - function:   the scoring capability (name, score, score_batch)
    - weight:     contribution weight; negative inverts the signal, zero mutes it
    - normalizer: per-function override; None means "use the engine default",
                  resolved when ranking, not at construction
    """

    function: ScoringFunction[T]
    weight: float = 1.0
    normalizer: ScoreNormalizer | None = None

    @property
    def name(self) -> str:
        return self.function.name


@dataclass(frozen=True)
class RankingContext:
    """Per-item context handed to a strategy so rank-aware strategies know the corpus size."""

    total_items: int = 0
    current_index: int = 0
    parameters: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class RankedResult(Generic[T]):
    """
    One ranked item.

    - item:              the caller's item, untouched
    - final_score:       combined score produced by the strategy
    - individual_scores: function name -> raw (not normalized) score
    - rank:              1-based position, assigned once after the full sort
    - metadata:          open bag for callers
    """

    item: T
    final_score: float
    individual_scores: Mapping[str, float]
    rank: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectedPassage:
    """A passage chosen by diversity-aware selection."""

    index: int
    text: str
    relevance: float
