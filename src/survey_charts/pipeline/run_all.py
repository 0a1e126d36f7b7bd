from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from survey_charts.config import AppConfig
from survey_charts.errors import InvalidInput
from survey_charts.features.charts import (
    build_box_summaries,
    build_cluster_tables,
    build_histograms,
    build_risk_curve,
    build_roc_table,
    build_violin_densities,
)
from survey_charts.io.read import load_records
from survey_charts.io.write import write_summary, write_table
from survey_charts.paths import build_output_paths
from survey_charts.preprocess.groups import (
    STATUS_ORDER,
    age_group_labels,
    assign_age_group,
    assign_status,
)
from survey_charts.stats.density import evaluation_grid
from survey_charts.stats.histogram import nice_ticks
from survey_charts.stats.quantiles import five_number_summary
from survey_charts.stats.risk import roc_auc
from survey_charts.stats.sample import clean_sample

LOGGER = logging.getLogger(__name__)


def prepare_base_dataframe(csv_path: Path, config: AppConfig) -> pd.DataFrame:
    df = load_records(csv_path=csv_path, config=config)
    columns = config.columns
    df["status"] = assign_status(
        df[columns.value],
        prediabetes_cutoff=config.status.prediabetes_cutoff,
        diabetes_cutoff=config.status.diabetes_cutoff,
    )
    if columns.age:
        df["age_group"] = assign_age_group(df[columns.age], config.age_groups.upper_edges)
    return df


def _histogram_thresholds(
    lo: float,
    hi: float,
    config: AppConfig,
) -> list[float]:
    if config.histogram.nice:
        return nice_ticks(lo, hi, config.histogram.tick_count)
    edges = np.linspace(lo, hi, config.histogram.tick_count + 1)
    return [float(edge) for edge in edges[1:-1]]


def build_chart_tables(
    df: pd.DataFrame,
    config: AppConfig,
    rng: np.random.Generator | None = None,
) -> tuple[dict[str, pd.DataFrame], dict[str, Any]]:
    """Compute every chart table for a prepared survey frame.

    Returns the tables keyed by output name and a JSON-ready summary.
    """
    columns = config.columns
    value_col = columns.value
    values = clean_sample(df[value_col])
    if values.size == 0:
        raise InvalidInput(f"Column {value_col!r} has no numeric values")

    lo, hi = float(values.min()), float(values.max())
    summary: dict[str, Any] = {
        "n_rows": int(len(df)),
        "n_values": int(values.size),
        "value_column": value_col,
        "overall": five_number_summary(values).to_dict(),
    }
    tables: dict[str, pd.DataFrame] = {}

    padding = config.histogram.domain_padding
    if padding == 0 and lo == hi:
        # A single distinct value still needs a non-empty domain.
        padding = 0.5
    domain = (lo - padding, hi + padding)
    tables["histogram_by_status"] = build_histograms(
        df,
        value_col=value_col,
        group_col="status",
        domain=domain,
        thresholds=_histogram_thresholds(domain[0], domain[1], config),
        groups=STATUS_ORDER,
    )

    if columns.age:
        grid = evaluation_grid(
            lo - config.density.grid_padding,
            hi + config.density.grid_padding,
            config.density.grid_step,
        )
        tables["violin_by_age_group"] = build_violin_densities(
            df,
            value_col=value_col,
            group_col="age_group",
            bandwidth=config.density.bandwidth,
            grid=grid,
            groups=age_group_labels(config.age_groups.upper_edges),
        )

    if columns.gender:
        tables["box_by_gender"] = build_box_summaries(
            df,
            value_col=value_col,
            group_col=columns.gender,
            min_group_size=config.box.min_group_size,
        )
    tables["box_by_status"] = build_box_summaries(
        df,
        value_col=value_col,
        group_col="status",
        groups=STATUS_ORDER,
        min_group_size=config.box.min_group_size,
    )

    if columns.outcome:
        tables["risk_curve"] = build_risk_curve(
            df,
            value_col=value_col,
            outcome_col=columns.outcome,
            step=config.risk_curve.step,
        )
        # ROC only sees rows where both the score and the outcome are present.
        paired = (
            df.loc[:, [value_col, columns.outcome]]
            .apply(pd.to_numeric, errors="coerce")
            .dropna()
        )
        if paired[columns.outcome].nunique() >= 2:
            tables["roc_curve"] = build_roc_table(paired, value_col, columns.outcome)
            summary["roc_auc"] = roc_auc(paired[value_col], paired[columns.outcome])
        else:
            LOGGER.warning("Skipping ROC curve: %r needs both outcome classes", columns.outcome)

    cluster_columns = [columns.cluster_x, columns.cluster_y]
    if config.clustering.enabled and all(cluster_columns):
        n_points = _complete_rows(df, cluster_columns)
        if n_points < config.clustering.k:
            LOGGER.warning(
                "Skipping clustering: %d complete rows for k=%d", n_points, config.clustering.k
            )
        else:
            _add_cluster_tables(df, config, rng, tables, summary)

    summary["tables"] = sorted(tables)
    return tables, summary


def _complete_rows(df: pd.DataFrame, columns: list[str]) -> int:
    numeric = df[columns].apply(pd.to_numeric, errors="coerce")
    return int(np.isfinite(numeric).all(axis=1).sum())


def _add_cluster_tables(
    df: pd.DataFrame,
    config: AppConfig,
    rng: np.random.Generator | None,
    tables: dict[str, pd.DataFrame],
    summary: dict[str, Any],
) -> None:
    columns = config.columns
    generator = rng if rng is not None else np.random.default_rng(config.clustering.random_seed)
    assignments, centroids = build_cluster_tables(
        df,
        x_col=str(columns.cluster_x),
        y_col=str(columns.cluster_y),
        k=config.clustering.k,
        max_iter=config.clustering.max_iter,
        labels=config.clustering.labels,
        rng=generator,
    )
    tables["cluster_assignments"] = assignments
    tables["cluster_centroids"] = centroids
    summary["clustering"] = {
        "k": config.clustering.k,
        "iterations": int(centroids["iterations"].iloc[0]),
        "converged": bool(centroids["converged"].iloc[0]),
    }


def run_all(csv_path: Path, out_dir: Path, config: AppConfig) -> dict[str, Path]:
    paths = build_output_paths(out_dir)
    df = prepare_base_dataframe(csv_path=csv_path, config=config)
    tables, summary = build_chart_tables(df, config)

    fmt = config.outputs.tables_format
    written: dict[str, Path] = {}
    for name, table in tables.items():
        written[name] = write_table(table, paths.tables / f"{name}.{fmt}", fmt=fmt)
    written["summary"] = write_summary(summary, paths.summary / "summary.json")
    LOGGER.info("Wrote %d chart tables to %s", len(tables), paths.tables)
    return written
