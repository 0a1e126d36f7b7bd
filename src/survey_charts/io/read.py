from __future__ import annotations

from pathlib import Path

import pandas as pd

from survey_charts.config import AppConfig, ColumnsConfig


def configured_columns(columns: ColumnsConfig) -> list[str]:
    names = [
        columns.value,
        columns.age,
        columns.gender,
        columns.outcome,
        columns.cluster_x,
        columns.cluster_y,
    ]
    return list(dict.fromkeys(name for name in names if name))


def _validate_required_columns(df: pd.DataFrame, required: list[str]) -> pd.DataFrame:
    for column in required:
        if column not in df.columns:
            raise ValueError(f"Input data missing column: {column}")
    return df


def load_records(csv_path: Path, config: AppConfig) -> pd.DataFrame:
    """Load survey rows and coerce every configured numeric column to floats."""
    # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
    df = pd.read_csv(csv_path, encoding="utf-8-sig")
    df.columns = [str(column).strip() for column in df.columns]
    _validate_required_columns(df, configured_columns(config.columns))

    numeric_columns = {
        config.columns.value,
        config.columns.age,
        config.columns.outcome,
        config.columns.cluster_x,
        config.columns.cluster_y,
    }
    for column in sorted(name for name in numeric_columns if name):
        df[column] = pd.to_numeric(df[column], errors="coerce")
    return df
