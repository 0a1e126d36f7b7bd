from __future__ import annotations

import logging
from typing import Iterable

import numpy as np
import pandas as pd

from survey_charts.errors import InvalidInput

LOGGER = logging.getLogger(__name__)


def _to_float_array(values: pd.Series | np.ndarray | Iterable[float]) -> np.ndarray:
    if isinstance(values, pd.Series):
        return pd.to_numeric(values, errors="coerce").to_numpy(dtype=float)
    try:
        return np.asarray(values, dtype=float).ravel()
    except (TypeError, ValueError):
        coerced = pd.to_numeric(pd.Series(list(values), dtype=object), errors="coerce")
        return coerced.to_numpy(dtype=float)


def clean_sample(values: pd.Series | np.ndarray | Iterable[float]) -> np.ndarray:
    """Coerce values to floats and drop anything missing or non-finite."""
    array = _to_float_array(values)
    finite = np.isfinite(array)
    dropped = int(array.size - finite.sum())
    if dropped:
        LOGGER.debug("Dropped %d non-finite values from sample of %d", dropped, array.size)
    return array[finite].copy()


def as_sample(values: pd.Series | np.ndarray | Iterable[float]) -> np.ndarray:
    """Return values as a 1-D float array, rejecting missing or non-finite entries."""
    try:
        array = np.array(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Sample must be numeric: {exc}") from exc
    if array.ndim != 1:
        raise InvalidInput(f"Sample must be one-dimensional, got shape {array.shape}")
    if not np.all(np.isfinite(array)):
        raise InvalidInput("Sample contains NaN or infinite values; clean it first")
    return array
