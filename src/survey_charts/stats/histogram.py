from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from survey_charts.errors import InvalidDomain, InvalidInput
from survey_charts.stats.sample import as_sample

_E10 = math.sqrt(50.0)
_E5 = math.sqrt(10.0)
_E2 = math.sqrt(2.0)


@dataclass(frozen=True)
class HistogramBin:
    x0: float
    x1: float
    count: int

    @property
    def width(self) -> float:
        return self.x1 - self.x0


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    step = (stop - start) / max(0.0, count)
    power = math.floor(math.log10(step))
    error = step / (10.0**power)
    if error >= _E10:
        factor = 10.0
    elif error >= _E5:
        factor = 5.0
    elif error >= _E2:
        factor = 2.0
    else:
        factor = 1.0

    if power < 0:
        inc = (10.0**-power) / factor
        i1 = round(start * inc)
        i2 = round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = (10.0**power) * factor
        i1 = round(start / inc)
        i2 = round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1

    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return int(i1), int(i2), inc


def nice_ticks(start: float, stop: float, count: int) -> list[float]:
    """Round tick values (1, 2 or 5 times a power of ten) inside [start, stop].

    Roughly ``count`` ticks are produced; the exact number depends on which
    step size fits the range.
    """
    if count <= 0:
        return []
    if not (math.isfinite(start) and math.isfinite(stop)):
        raise InvalidInput("Tick range must be finite")
    if start == stop:
        return [float(start)]

    reverse = stop < start
    if reverse:
        start, stop = stop, start
    i1, i2, inc = _tick_spec(start, stop, float(count))
    if i2 < i1:
        return []

    indices = range(i1, i2 + 1)
    if inc < 0:
        ticks = [index / -inc for index in indices]
    else:
        ticks = [index * inc for index in indices]
    return ticks[::-1] if reverse else ticks


def _check_domain(domain: Sequence[float]) -> tuple[float, float]:
    if len(domain) != 2:
        raise InvalidDomain(f"Domain must be a (min, max) pair, got {domain!r}")
    lo, hi = float(domain[0]), float(domain[1])
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise InvalidDomain(f"Domain bounds must be finite, got [{lo}, {hi}]")
    if lo >= hi:
        raise InvalidDomain(f"Domain minimum {lo} must be below maximum {hi}")
    return lo, hi


def _bin_edges(
    lo: float,
    hi: float,
    thresholds: Sequence[float] | None,
    bin_count: int | None,
) -> np.ndarray:
    if (thresholds is None) == (bin_count is None):
        raise InvalidInput("Provide exactly one of thresholds or bin_count")
    if bin_count is not None:
        if int(bin_count) != bin_count or bin_count < 1:
            raise InvalidInput(f"bin_count must be a positive integer, got {bin_count}")
        edges = np.linspace(lo, hi, int(bin_count) + 1)
        edges[0], edges[-1] = lo, hi
        return edges

    interior = np.asarray(list(thresholds or []), dtype=float)
    if not np.all(np.isfinite(interior)):
        raise InvalidInput("Thresholds must be finite numbers")
    interior = np.unique(interior[(interior > lo) & (interior < hi)])
    return np.concatenate(([lo], interior, [hi]))


def histogram(
    sample,
    domain: Sequence[float],
    *,
    thresholds: Sequence[float] | None = None,
    bin_count: int | None = None,
) -> list[HistogramBin]:
    """Count sample values into contiguous bins covering ``domain``.

    Bins are half-open ``[x0, x1)`` except the last, which also includes the
    domain maximum. Values outside the domain are not counted.
    """
    lo, hi = _check_domain(domain)
    edges = _bin_edges(lo, hi, thresholds, bin_count)
    values = as_sample(sample)

    n_bins = edges.size - 1
    inside = values[(values >= lo) & (values <= hi)]
    # Right-side search puts a value equal to an interior edge in the upper bin
    # and the domain maximum in the last bin.
    indices = np.searchsorted(edges[1:-1], inside, side="right")
    counts = np.bincount(indices, minlength=n_bins)

    return [
        HistogramBin(x0=float(edges[i]), x1=float(edges[i + 1]), count=int(counts[i]))
        for i in range(n_bins)
    ]


def bins_to_frame(bins: Sequence[HistogramBin]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "x0": [b.x0 for b in bins],
            "x1": [b.x1 for b in bins],
            "count": [b.count for b in bins],
        },
        columns=["x0", "x1", "count"],
    )
