from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from survey_charts.stats.quantiles import tercile_cutoffs
from survey_charts.stats.sample import clean_sample

STATUS_NORMAL = "normal"
STATUS_PREDIABETES = "prediabetes"
STATUS_DIABETES = "diabetes"
STATUS_ORDER = [STATUS_NORMAL, STATUS_PREDIABETES, STATUS_DIABETES]

AGE_GROUP_OTHER = "Other"
TERCILE_LABELS = ["Low", "Mid", "High"]


def _numeric(values: pd.Series | Sequence[float]) -> pd.Series:
    series = values if isinstance(values, pd.Series) else pd.Series(list(values))
    return pd.to_numeric(series, errors="coerce")


def assign_status(
    values: pd.Series | Sequence[float],
    prediabetes_cutoff: float = 5.7,
    diabetes_cutoff: float = 6.5,
) -> pd.Series:
    """Label HbA1c readings as normal / prediabetes / diabetes; missing stays missing."""
    numeric = _numeric(values)
    labels = np.select(
        [numeric < prediabetes_cutoff, numeric < diabetes_cutoff, numeric >= diabetes_cutoff],
        [STATUS_NORMAL, STATUS_PREDIABETES, STATUS_DIABETES],
        default=None,
    )
    return pd.Series(labels, index=numeric.index, dtype=object)


def age_group_labels(upper_edges: Sequence[float]) -> list[str]:
    labels: list[str] = []
    lower = 0.0
    for edge in upper_edges:
        labels.append(f"{lower:g}–{float(edge):g}")
        lower = float(edge)
    return labels


def assign_age_group(
    ages: pd.Series | Sequence[float],
    upper_edges: Sequence[float] = (20, 40, 60, 80),
) -> pd.Series:
    """Right-closed age buckets; anything past the last edge is ``Other``."""
    numeric = _numeric(ages)
    edges = [-np.inf, *[float(edge) for edge in upper_edges], np.inf]
    labels = [*age_group_labels(upper_edges), AGE_GROUP_OTHER]
    groups = pd.cut(numeric, bins=edges, labels=labels, right=True).astype(object)
    return pd.Series(
        [label if isinstance(label, str) else None for label in groups],
        index=numeric.index,
        dtype=object,
    )


def assign_terciles(values: pd.Series | Sequence[float]) -> pd.Series:
    numeric = _numeric(values)
    sample = clean_sample(numeric)
    if sample.size == 0:
        return pd.Series([None] * len(numeric), index=numeric.index, dtype=object)

    t1, t2 = tercile_cutoffs(sample)
    labels = np.select(
        [numeric <= t1, numeric <= t2, numeric > t2],
        TERCILE_LABELS,
        default=None,
    )
    return pd.Series(labels, index=numeric.index, dtype=object)
