"""Reusable scoring functions for the ranking engine.

Each one satisfies the ScoringFunction capability: ``score_batch(items)[i]``
equals ``score(items[i])``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from contextrank.domain.errors import DimensionMismatchError, ValidationError
from contextrank.domain.similarity import cosine
from contextrank.domain.types import Vector

T = TypeVar("T")

_MISSING = object()


class FieldScoringFunction:
    """Reads a numeric field from each item (mapping key first, then attribute).

    Example:
        FieldScoringFunction("Popularity", "popularity_rank", transform=lambda r: 1.0 / r)
    """

    def __init__(
        self,
        name: str,
        field: str,
        transform: Callable[[float], float] | None = None,
        default: float | None = None,
    ) -> None:
        if not name:
            raise ValidationError("scoring function name must not be empty")
        self.name = name
        self.field = field
        self.transform = transform
        self.default = default

    def _lookup(self, item: Any) -> Any:
        if isinstance(item, Mapping):
            return item.get(self.field, _MISSING)
        return getattr(item, self.field, _MISSING)

    def score(self, item: Any) -> float:
        value = self._lookup(item)
        if value is _MISSING or value is None:
            if self.default is None:
                raise ValidationError(f"item has no numeric field '{self.field}'")
            value = self.default
        value = float(value)
        return float(self.transform(value)) if self.transform else value

    def score_batch(self, items: Sequence[Any]) -> list[float]:
        return [self.score(it) for it in items]


class ConstantScoringFunction:
    """Gives every item the same score."""

    def __init__(self, value: float, name: str = "Constant") -> None:
        self.name = name
        self.value = float(value)

    def score(self, item: Any) -> float:
        return self.value

    def score_batch(self, items: Sequence[Any]) -> list[float]:
        return [self.value] * len(items)


class EmbeddingSimilarityScoringFunction(Generic[T]):
    """Cosine similarity between each item's embedding and a fixed query vector."""

    def __init__(
        self,
        query: Vector,
        embedding_of: Callable[[T], Vector],
        name: str = "SemanticSimilarity",
    ) -> None:
        if query is None:
            raise ValidationError("Query vector cannot be None.")
        self.name = name
        self.query = query
        self.embedding_of = embedding_of

    def _score_at(self, index: int, item: T) -> float:
        vec = self.embedding_of(item)
        if vec is None:
            raise ValidationError(f"item at index {index} has no embedding")
        if len(vec) != len(self.query):
            raise DimensionMismatchError(index=index, actual=len(vec), expected=len(self.query))
        return cosine(vec, self.query)

    def score(self, item: T) -> float:
        return self._score_at(0, item)

    def score_batch(self, items: Sequence[T]) -> list[float]:
        return [self._score_at(i, it) for i, it in enumerate(items)]
