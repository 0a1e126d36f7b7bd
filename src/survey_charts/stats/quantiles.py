from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np

from survey_charts.errors import InvalidInput
from survey_charts.stats.sample import as_sample

DEFAULT_WHISKER_SCALE = 1.5


@dataclass(frozen=True)
class FiveNumberSummary:
    q1: float
    median: float
    q3: float
    lower_whisker: float
    upper_whisker: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def quantile_sorted(sorted_values: np.ndarray, p: float) -> float:
    """Linear-interpolation quantile of an ascending array.

    With ``h = p * (n - 1)`` the result is ``v[floor(h)]`` plus the fractional
    part of ``h`` times the gap to the next value.
    """
    if not 0.0 <= p <= 1.0:
        raise InvalidInput(f"Quantile fraction must be within [0, 1], got {p}")
    if sorted_values.size == 0:
        raise InvalidInput("Cannot compute a quantile of an empty sample")
    return float(np.quantile(sorted_values, p, method="linear"))


def quantile(values, p: float) -> float:
    return quantile_sorted(np.sort(as_sample(values), kind="stable"), p)


def five_number_summary(
    values,
    whisker_scale: float = DEFAULT_WHISKER_SCALE,
) -> FiveNumberSummary:
    """Box-plot statistics with Tukey whiskers clipped to the sample range."""
    sample = as_sample(values)
    if sample.size == 0:
        raise InvalidInput("Cannot summarize an empty sample")

    ordered = np.sort(sample, kind="stable")
    q1 = quantile_sorted(ordered, 0.25)
    median = quantile_sorted(ordered, 0.5)
    q3 = quantile_sorted(ordered, 0.75)
    iqr = q3 - q1

    return FiveNumberSummary(
        q1=q1,
        median=median,
        q3=q3,
        lower_whisker=max(float(ordered[0]), q1 - whisker_scale * iqr),
        upper_whisker=min(float(ordered[-1]), q3 + whisker_scale * iqr),
    )


def tercile_cutoffs(values) -> tuple[float, float]:
    ordered = np.sort(as_sample(values), kind="stable")
    return quantile_sorted(ordered, 1.0 / 3.0), quantile_sorted(ordered, 2.0 / 3.0)
