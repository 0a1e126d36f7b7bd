from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from survey_charts.stats.density import kernel_density_estimate
from survey_charts.stats.histogram import bins_to_frame, histogram
from survey_charts.stats.kmeans import kmeans
from survey_charts.stats.quantiles import five_number_summary
from survey_charts.stats.risk import (
    label_clusters_by_x,
    roc_curve_table,
    threshold_grid,
    threshold_proportions,
)
from survey_charts.stats.sample import clean_sample

LOGGER = logging.getLogger(__name__)

ALL_GROUP = "all"

BOX_COLUMNS = [
    "group",
    "n",
    "q1",
    "median",
    "q3",
    "iqr",
    "lower_whisker",
    "upper_whisker",
    "mean",
    "std",
    "is_insufficient",
]


def _group_values(
    df: pd.DataFrame,
    value_col: str,
    group_col: str,
    groups: Sequence[str] | None,
) -> list[tuple[str, np.ndarray]]:
    working = df.loc[:, [group_col, value_col]].dropna(subset=[group_col])
    keys = list(groups) if groups is not None else sorted(working[group_col].astype(str).unique())
    grouped = {
        str(key): frame[value_col] for key, frame in working.groupby(group_col, sort=False)
    }
    return [
        (str(key), clean_sample(grouped.get(str(key), pd.Series(dtype=float))))
        for key in keys
    ]


def build_box_summaries(
    df: pd.DataFrame,
    value_col: str,
    group_col: str,
    groups: Sequence[str] | None = None,
    min_group_size: int = 2,
) -> pd.DataFrame:
    """One box-plot row per group; empty groups keep NaN statistics."""
    rows: list[dict[str, object]] = []
    for key, values in _group_values(df, value_col, group_col, groups):
        row: dict[str, object] = {column: np.nan for column in BOX_COLUMNS}
        row["group"] = key
        row["n"] = int(values.size)
        row["is_insufficient"] = bool(values.size < max(1, int(min_group_size)))
        if values.size:
            summary = five_number_summary(values)
            row.update(summary.to_dict())
            row["iqr"] = summary.iqr
            row["mean"] = float(values.mean())
        if values.size >= 2:
            row["std"] = float(values.std(ddof=1))
        if row["is_insufficient"]:
            LOGGER.info("Group %r has only %d observations", key, values.size)
        rows.append(row)
    return pd.DataFrame(rows, columns=BOX_COLUMNS)


def build_violin_densities(
    df: pd.DataFrame,
    value_col: str,
    group_col: str,
    bandwidth: float,
    grid: np.ndarray,
    groups: Sequence[str] | None = None,
) -> pd.DataFrame:
    frames: list[pd.DataFrame] = []
    for key, values in _group_values(df, value_col, group_col, groups):
        curve = kernel_density_estimate(values, bandwidth=bandwidth, grid=grid).to_frame()
        curve.insert(0, "n", int(values.size))
        curve.insert(0, "group", key)
        frames.append(curve)
    if not frames:
        return pd.DataFrame(columns=["group", "n", "x", "density"])
    return pd.concat(frames, ignore_index=True)


def build_histograms(
    df: pd.DataFrame,
    value_col: str,
    group_col: str | None,
    domain: tuple[float, float],
    thresholds: Sequence[float],
    groups: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Bins for the full sample (``all``) followed by each group."""
    samples: list[tuple[str, np.ndarray]] = [(ALL_GROUP, clean_sample(df[value_col]))]
    if group_col is not None:
        samples.extend(_group_values(df, value_col, group_col, groups))

    frames: list[pd.DataFrame] = []
    for key, values in samples:
        table = bins_to_frame(histogram(values, domain, thresholds=thresholds))
        table.insert(0, "group", key)
        frames.append(table)
    return pd.concat(frames, ignore_index=True)


def build_risk_curve(
    df: pd.DataFrame,
    value_col: str,
    outcome_col: str,
    step: float,
) -> pd.DataFrame:
    working = df.loc[:, [value_col, outcome_col]].apply(pd.to_numeric, errors="coerce").dropna()
    if working.empty:
        return pd.DataFrame(columns=["threshold", "n_at_or_above", "n_positive", "proportion"])
    thresholds = threshold_grid(working[value_col], step)
    return threshold_proportions(working[value_col], working[outcome_col], thresholds)


def build_roc_table(df: pd.DataFrame, score_col: str, outcome_col: str) -> pd.DataFrame:
    working = df.loc[:, [score_col, outcome_col]].apply(pd.to_numeric, errors="coerce").dropna()
    return roc_curve_table(working[score_col], working[outcome_col])


def build_cluster_tables(
    df: pd.DataFrame,
    x_col: str,
    y_col: str,
    k: int,
    max_iter: int,
    labels: Sequence[str],
    rng: np.random.Generator,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Cluster (x, y) rows and label clusters by ascending centroid x.

    Returns the per-point table (input row index kept in ``row``) and the
    centroid table.
    """
    working = df.loc[:, [x_col, y_col]].apply(pd.to_numeric, errors="coerce")
    working = working[np.isfinite(working).all(axis=1)]
    points = working.to_numpy(dtype=float)

    result = kmeans(points, k=k, max_iter=max_iter, rng=rng)
    point_labels = label_clusters_by_x(result, labels)

    assignments = pd.DataFrame(
        {
            "row": working.index.to_numpy(),
            "x": points[:, 0],
            "y": points[:, 1],
            "cluster": result.assignment,
            "label": point_labels,
        }
    )

    order = np.argsort(result.centroids[:, 0], kind="stable")
    centroids = pd.DataFrame(
        {
            "cluster": order,
            "x": result.centroids[order, 0],
            "y": result.centroids[order, 1],
            "n": [int((result.assignment == idx).sum()) for idx in order],
            "label": list(labels),
        }
    )
    centroids["iterations"] = result.iterations
    centroids["converged"] = result.converged
    return assignments, centroids
