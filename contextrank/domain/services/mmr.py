# contextrank/domain/services/mmr.py
# Pure domain service: no I/O, deterministic, no external libraries.
from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from numbers import Real

from contextrank.domain.errors import DimensionMismatchError, ValidationError
from contextrank.domain.similarity import cosine_distance
from contextrank.domain.types import Vector

logger = logging.getLogger(__name__)


def _validate(vectors: Sequence[Vector | None], query: Vector | None, lambda_mult: float) -> None:
    if query is None:
        raise ValidationError("Query vector cannot be None.")
    if not isinstance(lambda_mult, Real) or isinstance(lambda_mult, bool):
        raise ValidationError(f"Lambda must be a number, but was {lambda_mult!r}.")
    if not (0.0 <= lambda_mult <= 1.0):
        raise ValidationError(f"Lambda must be between 0.0 and 1.0, but was {lambda_mult}.")

    expected = len(query)
    for i, vec in enumerate(vectors):
        if vec is None:
            raise ValidationError(f"Vector at index {i} is None; every candidate needs an embedding.")
        if len(vec) != expected:
            raise DimensionMismatchError(index=i, actual=len(vec), expected=expected)


def compute_mmr(
    vectors: Sequence[Vector | None] | None,
    query: Vector | None,
    lambda_mult: float = 0.5,
    top_k: int | None = None,
) -> list[tuple[int, Vector]]:
    """
    Maximum Marginal Relevance (MMR) selection over embeddings.

    Each round picks the remaining candidate maximizing
    ``lambda * relevance + (1 - lambda) * diversity`` where relevance is the
    cosine similarity to the query and diversity is ``1 - mean similarity`` to
    the candidates already picked (``1`` on the first round).

    Args:
        vectors: Candidate embeddings; all must share the query's length
        query: Query embedding
        lambda_mult: Relevance/diversity trade-off in [0, 1]; 1.0 is pure relevance
        top_k: Maximum number of candidates to select (None selects all)

    Returns:
        (index, embedding) pairs in selection order. The embedding is the
        caller's object, not a copy. When top_k covers the whole collection
        every candidate is returned in input order without scoring.

    Raises:
        ValidationError: If query is None, lambda is outside [0, 1] or a
            candidate embedding is None
        DimensionMismatchError: If a candidate's length differs from the query's

    NOTE:
    - Ties resolve to the lowest index: candidates are scanned in input order
      and only a strictly greater score replaces the current best.
    - O(n*d) precompute, then O(k*n) scans; similarity to the selection is
      accumulated per round so each scan adds one distance per candidate.
    """
    if vectors is None:
        vectors = ()
    _validate(vectors, query, lambda_mult)
    assert query is not None

    n = len(vectors)
    if n == 0:
        return []

    k = min(top_k if top_k is not None else n, n)
    if k <= 0:
        return []
    if k >= n:
        logger.debug("mmr: top_k=%s covers all %d candidates, returning input order", top_k, n)
        return [(i, v) for i, v in enumerate(vectors)]  # type: ignore[misc]

    # Precompute candidate similarities to the query
    query_sims = [1.0 - cosine_distance(v, query) for v in vectors]  # type: ignore[arg-type]

    selected: list[int] = []
    remaining = [True] * n
    # running sum of similarity to every selected candidate, in selection order
    sim_to_selected = [0.0] * n

    for _ in range(k):
        best_idx = -1
        best_score = -math.inf

        for i in range(n):
            if not remaining[i]:
                continue
            relevance_score = lambda_mult * query_sims[i]
            if not selected:
                diversity_score = 1.0 - lambda_mult
            else:
                avg_sim = sim_to_selected[i] / len(selected)
                diversity_score = (1.0 - lambda_mult) * (1.0 - avg_sim)

            score = relevance_score + diversity_score
            if score > best_score:
                best_score = score
                best_idx = i

        if best_idx == -1:
            break

        selected.append(best_idx)
        remaining[best_idx] = False
        picked = vectors[best_idx]
        for i in range(n):
            if remaining[i]:
                sim_to_selected[i] += 1.0 - cosine_distance(vectors[i], picked)  # type: ignore[arg-type]

    logger.debug("mmr: selected %d of %d candidates (lambda=%s)", len(selected), n, lambda_mult)
    return [(i, vectors[i]) for i in selected]  # type: ignore[misc]
