from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np
import pandas as pd
from scipy.integrate import trapezoid

from survey_charts.errors import InvalidInput
from survey_charts.stats.sample import as_sample

# Sample values evaluated per block; bounds the (grid x block) offset matrix.
SAMPLE_CHUNK_SIZE = 8192

Kernel = Callable[[np.ndarray], np.ndarray]


@dataclass(frozen=True)
class DensityCurve:
    x: np.ndarray
    density: np.ndarray

    def pairs(self) -> list[tuple[float, float]]:
        return [(float(x), float(d)) for x, d in zip(self.x, self.density)]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"x": self.x, "density": self.density})

    def area(self) -> float:
        """Trapezoid-rule integral of the curve over its grid."""
        if self.x.size < 2:
            return 0.0
        return float(trapezoid(self.density, self.x))


def epanechnikov(bandwidth: float) -> Kernel:
    """Epanechnikov kernel with the 1/h scale folded in.

    The returned function maps offsets ``x - v`` to ``0.75 * (1 - u**2) / h``
    where ``u = (x - v) / h`` and ``|u| <= 1``, and to zero elsewhere.
    """
    if not math.isfinite(bandwidth) or bandwidth <= 0.0:
        raise InvalidInput(f"Bandwidth must be a positive finite number, got {bandwidth}")

    def kernel(offsets: np.ndarray) -> np.ndarray:
        u = np.asarray(offsets, dtype=float) / bandwidth
        return np.where(np.abs(u) <= 1.0, 0.75 * (1.0 - u * u) / bandwidth, 0.0)

    return kernel


def evaluation_grid(start: float, stop: float, step: float) -> np.ndarray:
    """Evenly spaced points from ``start`` through ``stop`` inclusive."""
    if not (math.isfinite(start) and math.isfinite(stop) and math.isfinite(step)):
        raise InvalidInput("Grid bounds and step must be finite")
    if step <= 0.0:
        raise InvalidInput(f"Grid step must be positive, got {step}")
    if stop < start:
        raise InvalidInput(f"Grid stop {stop} is below start {start}")

    count = int(math.floor((stop - start) / step + 1e-9)) + 1
    return start + np.arange(count, dtype=float) * step


def _as_grid(grid) -> np.ndarray:
    try:
        points = np.array(grid, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Evaluation grid must be numeric: {exc}") from exc
    if points.ndim != 1:
        raise InvalidInput(f"Evaluation grid must be one-dimensional, got shape {points.shape}")
    if not np.all(np.isfinite(points)):
        raise InvalidInput("Evaluation grid contains NaN or infinite values")
    if points.size > 1 and np.any(np.diff(points) < 0):
        raise InvalidInput("Evaluation grid must be in ascending order")
    return points


def kernel_density_estimate(sample, bandwidth: float, grid) -> DensityCurve:
    """Epanechnikov density of ``sample`` at every grid point.

    Density at ``x`` is the mean of ``kernel(x - v)`` over the sample. An empty
    sample yields a zero curve rather than NaN.
    """
    kernel = epanechnikov(bandwidth)
    values = as_sample(sample)
    points = _as_grid(grid)

    totals = np.zeros(points.size, dtype=float)
    if values.size == 0:
        return DensityCurve(x=points, density=totals)

    for start in range(0, values.size, SAMPLE_CHUNK_SIZE):
        block = values[start : start + SAMPLE_CHUNK_SIZE]
        totals += kernel(points[:, None] - block[None, :]).sum(axis=1)

    return DensityCurve(x=points, density=totals / float(values.size))
