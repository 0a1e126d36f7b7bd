from __future__ import annotations

from decimal import Decimal
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import roc_auc_score, roc_curve

from survey_charts.errors import InvalidInput
from survey_charts.stats.density import evaluation_grid
from survey_charts.stats.kmeans import KMeansResult
from survey_charts.stats.sample import as_sample


def _paired(values, outcomes) -> tuple[np.ndarray, np.ndarray]:
    scores = as_sample(values)
    labels = as_sample(outcomes)
    if scores.size != labels.size:
        raise InvalidInput(
            f"values and outcomes must have the same length ({scores.size} != {labels.size})"
        )
    if not np.isin(labels, (0.0, 1.0)).all():
        raise InvalidInput("outcomes must be binary (0 or 1)")
    return scores, labels.astype(int)


def _step_decimals(step: float) -> int:
    exponent = Decimal(str(step)).normalize().as_tuple().exponent
    return max(0, -int(exponent))


def threshold_grid(values, step: float) -> np.ndarray:
    """Thresholds from min(values) to max(values) in ``step`` increments.

    Each threshold is rounded to the decimals of ``step`` so an off-grid
    minimum still yields thresholds on the step grid.
    """
    sample = as_sample(values)
    if sample.size == 0:
        raise InvalidInput("Cannot build thresholds for an empty sample")
    grid = evaluation_grid(float(sample.min()), float(sample.max()), step)
    return np.round(grid, _step_decimals(step))


def threshold_proportions(values, outcomes, thresholds: Sequence[float]) -> pd.DataFrame:
    """Share of positive outcomes among observations at or above each threshold.

    Thresholds with no observations at or above them get a NaN proportion and
    ``n_at_or_above == 0``.
    """
    scores, labels = _paired(values, outcomes)
    cuts = as_sample(thresholds)

    ordered = np.argsort(scores, kind="stable")
    sorted_scores = scores[ordered]
    # Positives at index i and beyond in score order.
    positives_tail = np.concatenate((np.cumsum(labels[ordered][::-1])[::-1], [0]))

    first_at_or_above = np.searchsorted(sorted_scores, cuts, side="left")
    n_at_or_above = scores.size - first_at_or_above
    n_positive = positives_tail[first_at_or_above]

    table = pd.DataFrame(
        {
            "threshold": cuts,
            "n_at_or_above": n_at_or_above.astype(int),
            "n_positive": n_positive.astype(int),
        }
    )
    table["proportion"] = (table["n_positive"] / table["n_at_or_above"]).where(
        table["n_at_or_above"] > 0
    )
    return table


def _require_both_classes(labels: np.ndarray) -> None:
    if np.unique(labels).size < 2:
        raise InvalidInput("ROC analysis needs both positive and negative outcomes")


def roc_curve_table(scores, outcomes) -> pd.DataFrame:
    values, labels = _paired(scores, outcomes)
    _require_both_classes(labels)
    fpr, tpr, thresholds = roc_curve(labels, values)
    return pd.DataFrame({"threshold": thresholds, "fpr": fpr, "tpr": tpr})


def roc_auc(scores, outcomes) -> float:
    values, labels = _paired(scores, outcomes)
    _require_both_classes(labels)
    return float(roc_auc_score(labels, values))


def label_clusters_by_x(result: KMeansResult, labels: Sequence[str]) -> list[str]:
    """Map each point's cluster to an ordinal label by centroid x-coordinate.

    The cluster with the smallest centroid x gets ``labels[0]``.
    """
    if len(labels) != result.k:
        raise InvalidInput(f"Expected {result.k} labels, got {len(labels)}")
    order = np.argsort(result.centroids[:, 0], kind="stable")
    label_for_cluster = {int(cluster): labels[rank] for rank, cluster in enumerate(order)}
    return [label_for_cluster[int(cluster)] for cluster in result.assignment]
