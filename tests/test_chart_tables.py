from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from survey_charts.features.charts import (
    build_box_summaries,
    build_cluster_tables,
    build_histograms,
    build_risk_curve,
    build_roc_table,
    build_violin_densities,
)


def _frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "gender": ["Male", "Female", "Male", "Female", "Male", "Other"],
            "hba1c": [5.0, 5.8, 6.6, "n/a", 7.4, 6.0],
            "diabetes": [0, 0, 1, 0, 1, 0],
            "bmi": [21.0, 24.0, 33.0, 26.0, 35.0, 23.0],
        }
    )


def test_box_summaries_flag_small_and_empty_groups() -> None:
    table = build_box_summaries(
        _frame(),
        value_col="hba1c",
        group_col="gender",
        groups=["Male", "Female", "Other", "Unknown"],
    )

    rows = table.set_index("group")
    assert rows.loc["Male", "n"] == 3
    assert rows.loc["Male", "median"] == pytest.approx(6.6)
    assert rows.loc["Male", "std"] == pytest.approx(np.std([5.0, 6.6, 7.4], ddof=1))
    assert not rows.loc["Male", "is_insufficient"]

    # "n/a" is dropped, leaving a single Female value.
    assert rows.loc["Female", "n"] == 1
    assert rows.loc["Female", "q1"] == pytest.approx(5.8)
    assert np.isnan(rows.loc["Female", "std"])
    assert rows.loc["Female", "is_insufficient"]

    assert rows.loc["Unknown", "n"] == 0
    assert np.isnan(rows.loc["Unknown", "median"])
    assert rows.loc["Unknown", "is_insufficient"]


def test_box_summaries_default_to_sorted_observed_groups() -> None:
    table = build_box_summaries(_frame(), value_col="hba1c", group_col="gender")
    assert table["group"].tolist() == ["Female", "Male", "Other"]


def test_violin_densities_cover_every_group_and_grid_point() -> None:
    grid = np.arange(4.5, 8.01, 0.5)
    table = build_violin_densities(
        _frame(),
        value_col="hba1c",
        group_col="gender",
        bandwidth=0.4,
        grid=grid,
        groups=["Male", "Nobody"],
    )

    assert list(table.columns) == ["group", "n", "x", "density"]
    assert len(table) == 2 * grid.size
    nobody = table[table["group"] == "Nobody"]
    assert (nobody["density"] == 0.0).all()
    assert (nobody["n"] == 0).all()
    assert (table["density"] >= 0.0).all()


def test_histograms_include_all_rows_then_groups() -> None:
    table = build_histograms(
        _frame(),
        value_col="hba1c",
        group_col="gender",
        domain=(4.0, 8.0),
        thresholds=[5.0, 6.0, 7.0],
        groups=["Male", "Female"],
    )

    assert table["group"].unique().tolist() == ["all", "Male", "Female"]
    all_rows = table[table["group"] == "all"]
    assert all_rows["count"].tolist() == [0, 2, 2, 1]
    assert table.loc[table["group"] == "Male", "count"].sum() == 3


def test_risk_curve_and_roc_tables() -> None:
    risk = build_risk_curve(_frame(), value_col="hba1c", outcome_col="diabetes", step=0.5)

    assert risk["threshold"].iloc[0] == pytest.approx(5.0)
    assert risk["n_at_or_above"].iloc[0] == 5
    assert risk["proportion"].iloc[-1] == pytest.approx(1.0)

    roc = build_roc_table(_frame(), score_col="hba1c", outcome_col="diabetes")
    assert {"threshold", "fpr", "tpr"} == set(roc.columns)


def test_cluster_tables_label_by_ascending_centroid_x() -> None:
    assignments, centroids = build_cluster_tables(
        _frame(),
        x_col="bmi",
        y_col="hba1c",
        k=2,
        max_iter=20,
        labels=["Lower risk", "Higher risk"],
        rng=np.random.default_rng(0),
    )

    # The row with an unparseable HbA1c value is excluded.
    assert assignments["row"].tolist() == [0, 1, 2, 4, 5]
    assert centroids["x"].is_monotonic_increasing
    assert centroids["label"].tolist() == ["Lower risk", "Higher risk"]
    assert centroids["n"].sum() == len(assignments)
    high = assignments[assignments["label"] == "Higher risk"]
    assert set(high["x"]) == {33.0, 35.0}
