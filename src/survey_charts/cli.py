from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import typer

from survey_charts.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from survey_charts.errors import InvalidInput
from survey_charts.logging import configure_logging
from survey_charts.pipeline.run_all import run_all
from survey_charts.stats.quantiles import five_number_summary
from survey_charts.stats.sample import clean_sample

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is None:
        return AppConfig()
    return load_config(config_path)


@app.command()
def summarize(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    column: str = typer.Option(..., help="Numeric column to summarize."),
    whisker_scale: float = typer.Option(1.5, min=0.0, help="IQR multiple for whiskers."),
) -> None:
    """Print the five-number summary of one CSV column as JSON."""
    configure_logging()
    df = pd.read_csv(csv, encoding="utf-8-sig")
    if column not in df.columns:
        raise typer.BadParameter(f"Column {column!r} not found in {csv.name}")

    values = clean_sample(df[column])
    try:
        summary = five_number_summary(values, whisker_scale=whisker_scale)
    except InvalidInput as exc:
        raise typer.BadParameter(f"Column {column!r}: {exc}") from exc

    payload = {"column": column, "n": int(values.size), **summary.to_dict(), "iqr": summary.iqr}
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


@app.command("run-all")
def run_all_command(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(
        None,
        exists=True,
        readable=True,
        resolve_path=True,
        help=f"YAML config (for example {DEFAULT_CONFIG_PATH}); built-in defaults when omitted.",
    ),
) -> None:
    """Compute every chart table from a survey CSV and write them under out/."""
    configure_logging()
    cfg = _load_app_config(config)
    written = run_all(csv_path=csv, out_dir=out, config=cfg)
    typer.echo(f"Run complete. Outputs: {', '.join(sorted(written))}")


if __name__ == "__main__":
    app()
