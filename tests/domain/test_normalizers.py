"""Tests for score normalizers."""

import pytest

from contextrank.domain.capabilities import ScoreNormalizer
from contextrank.domain.errors import ValidationError
from contextrank.domain.services.normalizers import (
    MinMaxNormalizer,
    PercentileNormalizer,
    ZScoreNormalizer,
    minmax_normalize,
    percentile_normalize,
    zscore_normalize,
)


class TestMinMax:
    def test_scales_to_unit_interval(self) -> None:
        assert minmax_normalize([1.0, 2.0, 3.0]) == pytest.approx([0.0, 0.5, 1.0])

    def test_keeps_input_order(self) -> None:
        assert minmax_normalize([3.0, 1.0, 2.0]) == pytest.approx([1.0, 0.0, 0.5])

    def test_equal_scores_map_to_midpoint(self) -> None:
        assert minmax_normalize([5.0, 5.0, 5.0]) == [0.5, 0.5, 0.5]

    def test_near_equal_scores_are_degenerate(self) -> None:
        assert minmax_normalize([1.0, 1.0 + 1e-12]) == [0.5, 0.5]

    def test_single_score(self) -> None:
        assert minmax_normalize([42.0]) == [0.5]

    def test_extreme_finite_range_stays_in_unit_interval(self) -> None:
        out = minmax_normalize([-1e308, 0.0, 1e308])
        assert out == pytest.approx([0.0, 0.5, 1.0])
        assert all(0.0 <= x <= 1.0 for x in out)

    def test_negative_scores(self) -> None:
        assert minmax_normalize([-10.0, 0.0, 10.0]) == pytest.approx([0.0, 0.5, 1.0])

    def test_empty(self) -> None:
        assert minmax_normalize([]) == []


class TestZScore:
    def test_uses_population_std(self) -> None:
        # mean 2, population std sqrt(2/3)
        out = zscore_normalize([1.0, 2.0, 3.0])
        assert out == pytest.approx([-1.224744871, 0.0, 1.224744871])

    def test_output_has_zero_mean(self) -> None:
        out = zscore_normalize([4.0, 8.0, 15.0, 16.0, 23.0, 42.0])
        assert sum(out) == pytest.approx(0.0, abs=1e-9)

    def test_equal_scores_map_to_zero(self) -> None:
        assert zscore_normalize([7.0, 7.0]) == [0.0, 0.0]

    def test_tiny_std_is_degenerate(self) -> None:
        # std is about 5e-13: nonzero, but below the 1e-10 cutoff
        assert zscore_normalize([1.0, 1.0 + 1e-12]) == [0.0, 0.0]

    def test_single_score_maps_to_zero(self) -> None:
        assert zscore_normalize([3.0]) == [0.0]

    def test_empty(self) -> None:
        assert zscore_normalize([]) == []


class TestPercentile:
    def test_fractional_rank(self) -> None:
        assert percentile_normalize([10.0, 30.0, 20.0]) == pytest.approx([0.0, 1.0, 0.5])

    def test_ties_share_lowest_rank(self) -> None:
        assert percentile_normalize([1.0, 1.0, 2.0]) == pytest.approx([0.0, 0.0, 1.0])

    def test_near_equal_scores_share_rank(self) -> None:
        assert percentile_normalize([1.0, 1.0 + 5e-11, 2.0]) == pytest.approx([0.0, 0.0, 1.0])

    def test_ties_in_the_middle(self) -> None:
        assert percentile_normalize([3.0, 2.0, 2.0, 1.0, 4.0]) == pytest.approx(
            [0.75, 0.25, 0.25, 0.0, 1.0]
        )

    def test_single_score_is_midpoint(self) -> None:
        assert percentile_normalize([9.0]) == [0.5]

    def test_empty(self) -> None:
        assert percentile_normalize([]) == []


@pytest.mark.parametrize("fn", [minmax_normalize, zscore_normalize, percentile_normalize])
def test_absent_input_is_rejected(fn) -> None:
    with pytest.raises(ValidationError):
        fn(None)


@pytest.mark.parametrize(
    "normalizer, name",
    [
        (MinMaxNormalizer(), "MinMax"),
        (ZScoreNormalizer(), "ZScore"),
        (PercentileNormalizer(), "Percentile"),
    ],
)
def test_normalizer_objects(normalizer, name) -> None:
    assert isinstance(normalizer, ScoreNormalizer)
    assert normalizer.name == name
    assert len(normalizer.normalize([1.0, 5.0, 3.0])) == 3


def test_normalizer_objects_delegate_to_functions() -> None:
    scores = [2.0, 9.0, 4.0, 4.0]
    assert MinMaxNormalizer().normalize(scores) == minmax_normalize(scores)
    assert ZScoreNormalizer().normalize(scores) == zscore_normalize(scores)
    assert PercentileNormalizer().normalize(scores) == percentile_normalize(scores)
