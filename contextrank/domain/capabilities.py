"""Capabilities the ranking core consumes.

Scoring functions, normalizers and strategies are swapped at call time; the
core only ever talks to them through these structural types.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from contextrank.domain.models import RankingContext

T_contra = TypeVar("T_contra", contravariant=True)


@runtime_checkable
class ScoringFunction(Protocol[T_contra]):
    """Scores items; ``score_batch(items)[i]`` must equal ``score(items[i])``."""

    @property
    def name(self) -> str: ...

    def score(self, item: T_contra) -> float: ...

    def score_batch(self, items: Sequence[T_contra]) -> list[float]: ...


@runtime_checkable
class ScoreNormalizer(Protocol):
    """Maps one function's raw scores onto a common scale (same length, input untouched)."""

    @property
    def name(self) -> str: ...

    def normalize(self, scores: Sequence[float]) -> list[float]: ...


@runtime_checkable
class RankingStrategy(Protocol):
    """Combines one item's normalized scores and weights into a single scalar."""

    @property
    def name(self) -> str: ...

    def combine(
        self,
        scores: Sequence[float] | None,
        weights: Sequence[float] | None,
        context: RankingContext | None = None,
    ) -> float: ...
