"""Tests for Maximum Marginal Relevance selection."""

import math
import random

import pytest

from contextrank.domain.errors import DimensionMismatchError, ValidationError
from contextrank.domain.services.mmr import compute_mmr


def _indices(result):
    return [i for i, _ in result]


class TestMMRSelection:
    def test_scenario_returns_three_valid_indices(self) -> None:
        """Mixed duplicates and orthogonal vectors, lambda=0.5, top_k=3."""
        vectors = [
            [1.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, 0.0, 1.0],
            [1.0, 1.0, 0.0],
            [1.0, 0.0, 1.0],
        ]
        result = compute_mmr(vectors, [1.0, 0.0, 0.0], lambda_mult=0.5, top_k=3)
        idx = _indices(result)
        assert len(idx) == 3
        assert len(set(idx)) == 3
        assert all(0 <= i < 6 for i in idx)

    def test_pure_relevance_orders_by_query_similarity(self) -> None:
        """lambda=1.0 ignores diversity: picks in descending relevance."""
        vectors = [[0.0, 1.0], [1.0, 0.0], [0.7, 0.7], [0.9, 0.1]]
        result = compute_mmr(vectors, [1.0, 0.0], lambda_mult=1.0, top_k=3)
        assert _indices(result) == [1, 3, 2]

    def test_pure_diversity_avoids_duplicates(self) -> None:
        """lambda=0.0 must not pick an identical twin while an alternative exists."""
        vectors = [[1.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]
        result = compute_mmr(vectors, [1.0, 0.0, 0.0], lambda_mult=0.0, top_k=2)
        assert _indices(result) == [0, 2]

    def test_lambda_shifts_second_pick(self) -> None:
        """Low lambda prefers the dissimilar candidate, high lambda the near-duplicate."""
        a = [1.0, 0.0]
        b = [0.95, math.sqrt(1 - 0.95**2)]  # close to a and to the query
        c = [0.6, 0.8]  # less relevant, far from a
        query = [1.0, 0.0]

        assert _indices(compute_mmr([a, b, c], query, lambda_mult=0.3, top_k=2)) == [0, 2]
        assert _indices(compute_mmr([a, b, c], query, lambda_mult=0.9, top_k=2)) == [0, 1]

    def test_tie_break_keeps_lowest_index(self) -> None:
        """Identical candidates: the first occurrence wins (strict > in index order)."""
        vectors = [[1.0, 0.0, 0.0], [1.0, 0.0, 0.0]]
        result = compute_mmr(vectors, [1.0, 0.0, 0.0], lambda_mult=1.0, top_k=1)
        assert _indices(result) == [0]

    def test_returns_original_embedding_objects(self) -> None:
        vectors = [[1.0, 0.0], [0.0, 1.0], [0.5, 0.5]]
        result = compute_mmr(vectors, [1.0, 0.0], top_k=2)
        for i, vec in result:
            assert vec is vectors[i]

    def test_inputs_are_not_mutated(self) -> None:
        vectors = [[1.0, 0.0], [0.0, 1.0], [0.5, 0.5]]
        query = [1.0, 0.0]
        snapshot = [list(v) for v in vectors]
        compute_mmr(vectors, query, lambda_mult=0.5, top_k=2)
        assert vectors == snapshot
        assert query == [1.0, 0.0]

    @pytest.mark.parametrize("top_k", [1, 2, 5, 9, 10, 15, None])
    def test_result_size_and_uniqueness(self, top_k) -> None:
        """|result| = min(top_k or n, n) and every index is unique and in range."""
        rng = random.Random(7)
        vectors = [[rng.uniform(-1, 1) for _ in range(8)] for _ in range(10)]
        query = [rng.uniform(-1, 1) for _ in range(8)]

        idx = _indices(compute_mmr(vectors, query, lambda_mult=0.6, top_k=top_k))

        expected = min(top_k if top_k is not None else 10, 10)
        assert len(idx) == expected
        assert len(set(idx)) == expected
        assert all(0 <= i < 10 for i in idx)


class TestMMRShortcuts:
    def test_top_k_covering_all_returns_input_order(self) -> None:
        """top_k >= n is a shortcut: input order, not relevance order."""
        vectors = [[0.0, 1.0], [1.0, 0.0], [0.7, 0.7]]
        assert _indices(compute_mmr(vectors, [1.0, 0.0], top_k=3)) == [0, 1, 2]
        assert _indices(compute_mmr(vectors, [1.0, 0.0], top_k=10)) == [0, 1, 2]

    def test_top_k_none_selects_all_in_input_order(self) -> None:
        vectors = [[0.0, 1.0], [1.0, 0.0]]
        assert _indices(compute_mmr(vectors, [1.0, 0.0])) == [0, 1]

    @pytest.mark.parametrize("top_k", [0, -1, -10])
    def test_non_positive_top_k_returns_empty(self, top_k) -> None:
        vectors = [[1.0, 0.0], [0.0, 1.0]]
        assert compute_mmr(vectors, [1.0, 0.0], top_k=top_k) == []

    def test_empty_candidates(self) -> None:
        assert compute_mmr([], [1.0, 0.0, 0.0], top_k=5) == []

    def test_absent_candidates(self) -> None:
        assert compute_mmr(None, [1.0, 0.0, 0.0], top_k=5) == []


class TestMMRValidation:
    def test_missing_query_is_usage_error(self) -> None:
        with pytest.raises(ValidationError, match="Query vector"):
            compute_mmr([[1.0, 0.0]], None)

    def test_missing_query_fails_even_without_candidates(self) -> None:
        with pytest.raises(ValidationError):
            compute_mmr([], None)

    @pytest.mark.parametrize("lam", [-0.01, 1.01, 2.0, float("nan")])
    def test_lambda_out_of_range(self, lam) -> None:
        with pytest.raises(ValidationError, match="Lambda"):
            compute_mmr([[1.0, 0.0]], [1.0, 0.0], lambda_mult=lam)

    @pytest.mark.parametrize("lam", [None, "0.5", True])
    def test_non_numeric_lambda_is_usage_error(self, lam) -> None:
        with pytest.raises(ValidationError, match="Lambda must be a number"):
            compute_mmr([[1.0, 0.0]], [1.0, 0.0], lambda_mult=lam)

    @pytest.mark.parametrize("lam", [0.0, 1.0])
    def test_lambda_bounds_are_inclusive(self, lam) -> None:
        assert len(compute_mmr([[1.0, 0.0], [0.0, 1.0]], [1.0, 0.0], lambda_mult=lam, top_k=1)) == 1

    def test_dimension_mismatch_names_index_and_lengths(self) -> None:
        vectors = [[1.0, 0.0, 0.0], [1.0, 0.0]]
        with pytest.raises(DimensionMismatchError) as exc:
            compute_mmr(vectors, [1.0, 0.0, 0.0], top_k=1)
        assert exc.value.index == 1
        assert exc.value.actual == 2
        assert exc.value.expected == 3

    def test_dimension_mismatch_fails_fast_even_for_zero_top_k(self) -> None:
        with pytest.raises(DimensionMismatchError):
            compute_mmr([[1.0], [1.0, 0.0]], [1.0, 0.0], top_k=0)

    def test_absent_embedding_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="index 1"):
            compute_mmr([[1.0, 0.0], None, [0.0, 1.0]], [1.0, 0.0], top_k=2)
