from __future__ import annotations

import numpy as np
import pytest

from survey_charts.errors import InvalidInput
from survey_charts.stats.quantiles import (
    FiveNumberSummary,
    five_number_summary,
    quantile,
    quantile_sorted,
    tercile_cutoffs,
)


def test_five_number_summary_for_one_through_nine() -> None:
    summary = five_number_summary([9, 1, 8, 2, 7, 3, 6, 4, 5])

    assert summary == FiveNumberSummary(
        q1=3.0, median=5.0, q3=7.0, lower_whisker=1.0, upper_whisker=9.0
    )
    assert summary.iqr == 4.0


def test_five_number_summary_single_value_collapses() -> None:
    summary = five_number_summary([5.0])
    assert set(summary.to_dict().values()) == {5.0}


def test_five_number_summary_clips_whiskers_at_tukey_fences() -> None:
    summary = five_number_summary([1, 2, 3, 4, 5, 6, 7, 8, 100])

    assert summary.q1 == 3.0
    assert summary.q3 == 7.0
    assert summary.lower_whisker == 1.0
    assert summary.upper_whisker == pytest.approx(13.0)


def test_five_number_summary_rejects_empty_and_missing_values() -> None:
    with pytest.raises(InvalidInput, match="empty"):
        five_number_summary([])
    with pytest.raises(InvalidInput, match="NaN"):
        five_number_summary([1.0, float("nan")])


def test_whisker_ordering_holds_for_random_samples() -> None:
    rng = np.random.default_rng(11)
    for size in (1, 2, 3, 10, 57, 400):
        sample = rng.lognormal(mean=1.0, sigma=0.8, size=size)
        s = five_number_summary(sample)
        assert s.lower_whisker <= s.q1 <= s.median <= s.q3 <= s.upper_whisker


def test_quantile_interpolates_between_neighbours() -> None:
    ordered = np.array([1.0, 2.0, 4.0, 8.0])

    assert quantile_sorted(ordered, 0.0) == 1.0
    assert quantile_sorted(ordered, 1.0) == 8.0
    assert quantile_sorted(ordered, 0.5) == pytest.approx(3.0)
    assert quantile([8.0, 1.0, 4.0, 2.0], 0.25) == pytest.approx(1.75)
    np.testing.assert_allclose(
        [quantile(ordered, p) for p in (0.1, 0.6, 0.9)],
        np.quantile(ordered, [0.1, 0.6, 0.9]),
    )

    with pytest.raises(InvalidInput, match="within"):
        quantile_sorted(ordered, 1.5)


@pytest.mark.parametrize("p", [0.0, 0.05, 0.25, 1.0 / 3.0, 0.5, 0.9, 1.0])
def test_quantile_sorted_matches_floor_interpolation(p: float) -> None:
    ordered = np.sort(np.random.default_rng(11).normal(6.0, 1.0, size=17))
    h = p * (ordered.size - 1)
    lo = int(np.floor(h))
    hi = min(lo + 1, ordered.size - 1)
    expected = ordered[lo] + (h - lo) * (ordered[hi] - ordered[lo])

    assert quantile_sorted(ordered, p) == pytest.approx(expected)


def test_quantile_sorted_rejects_empty_input() -> None:
    with pytest.raises(InvalidInput, match="empty"):
        quantile_sorted(np.array([], dtype=float), 0.5)


def test_tercile_cutoffs_split_sample_in_thirds() -> None:
    t1, t2 = tercile_cutoffs([1, 2, 3, 4, 5, 6, 7])
    assert t1 == pytest.approx(3.0)
    assert t2 == pytest.approx(5.0)
