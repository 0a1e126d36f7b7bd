from __future__ import annotations

import pytest

from survey_charts.errors import InvalidDomain, InvalidInput
from survey_charts.stats.histogram import bins_to_frame, histogram, nice_ticks


def test_equal_width_bins_close_the_last_bin() -> None:
    bins = histogram([0, 1, 5, 9.9, 10], (0, 10), bin_count=5)

    assert [(b.x0, b.x1) for b in bins] == [(0, 2), (2, 4), (4, 6), (6, 8), (8, 10)]
    assert [b.count for b in bins] == [2, 0, 1, 0, 2]
    assert sum(b.count for b in bins) == 5


def test_boundary_value_falls_in_upper_bin() -> None:
    bins = histogram([2.0, 4.0], (0, 6), thresholds=[2, 4])

    assert [b.count for b in bins] == [0, 1, 1]


def test_explicit_thresholds_are_clipped_and_deduplicated() -> None:
    bins = histogram([0.5, 1.5, 2.5, 7.0], (0, 3), thresholds=[-1, 1, 1, 2, 3, 4])

    assert [(b.x0, b.x1) for b in bins] == [(0, 1), (1, 2), (2, 3)]
    # 7.0 lies outside the domain and is not counted.
    assert [b.count for b in bins] == [1, 1, 1]


def test_bins_partition_the_domain() -> None:
    bins = histogram([], (3.5, 9.1), thresholds=[4, 5, 6, 7, 8, 9])

    assert bins[0].x0 == 3.5
    assert bins[-1].x1 == 9.1
    for left, right in zip(bins, bins[1:]):
        assert left.x1 == right.x0
        assert left.x0 < left.x1
    assert all(b.count == 0 for b in bins)


def test_histogram_is_deterministic() -> None:
    sample = [4.1, 5.5, 5.6, 6.2, 6.6, 8.8]
    first = histogram(sample, (4, 9), bin_count=5)
    second = histogram(sample, (4, 9), bin_count=5)
    assert first == second


def test_histogram_rejects_degenerate_domain_and_bad_arguments() -> None:
    with pytest.raises(InvalidDomain):
        histogram([1.0], (5, 5), bin_count=3)
    with pytest.raises(InvalidDomain):
        histogram([1.0], (6, 5), bin_count=3)
    with pytest.raises(InvalidInput, match="exactly one"):
        histogram([1.0], (0, 5))
    with pytest.raises(InvalidInput, match="exactly one"):
        histogram([1.0], (0, 5), thresholds=[1], bin_count=2)
    with pytest.raises(InvalidInput, match="bin_count"):
        histogram([1.0], (0, 5), bin_count=0)


def test_histogram_rejects_fractional_bin_count() -> None:
    with pytest.raises(InvalidInput, match="positive integer"):
        histogram([1.0, 2.0], (0, 5), bin_count=2.5)

    assert len(histogram([1.0, 2.0], (0, 5), bin_count=2.0)) == 2


def test_nice_ticks_use_round_steps() -> None:
    assert nice_ticks(0, 10, 5) == [0, 2, 4, 6, 8, 10]
    assert nice_ticks(0, 1, 10) == pytest.approx([i / 10 for i in range(11)])
    assert nice_ticks(3.5, 9.5, 30) == pytest.approx([3.6 + i * 0.2 for i in range(30)])
    assert nice_ticks(10, 0, 5) == [10, 8, 6, 4, 2, 0]
    assert nice_ticks(1, 1, 5) == [1.0]
    assert nice_ticks(0, 1, 0) == []


def test_bins_to_frame_columns() -> None:
    frame = bins_to_frame(histogram([1, 2, 3], (0, 4), bin_count=2))
    assert list(frame.columns) == ["x0", "x1", "count"]
    assert frame["count"].tolist() == [1, 2]
