from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ColumnsConfig(BaseModel):
    value: str = "HbA1c_level"
    age: str | None = "age"
    gender: str | None = "gender"
    outcome: str | None = "diabetes"
    cluster_x: str | None = "bmi"
    cluster_y: str | None = "HbA1c_level"


class StatusConfig(BaseModel):
    prediabetes_cutoff: float = 5.7
    diabetes_cutoff: float = 6.5

    @model_validator(mode="after")
    def _check_order(self) -> StatusConfig:
        if self.prediabetes_cutoff >= self.diabetes_cutoff:
            raise ValueError("status.prediabetes_cutoff must be below status.diabetes_cutoff")
        return self


class AgeGroupsConfig(BaseModel):
    upper_edges: list[float] = Field(default_factory=lambda: [20.0, 40.0, 60.0, 80.0])

    @model_validator(mode="after")
    def _check_edges(self) -> AgeGroupsConfig:
        edges = self.upper_edges
        if not edges:
            raise ValueError("age_groups.upper_edges must not be empty")
        if any(later <= earlier for earlier, later in zip(edges, edges[1:])):
            raise ValueError("age_groups.upper_edges must be strictly increasing")
        return self


class DensityConfig(BaseModel):
    bandwidth: float = Field(default=0.4, gt=0.0)
    grid_step: float = Field(default=0.1, gt=0.0)
    grid_padding: float = Field(default=0.0, ge=0.0)


class HistogramConfig(BaseModel):
    tick_count: int = Field(default=30, ge=1)
    domain_padding: float = Field(default=0.5, ge=0.0)
    nice: bool = True


class RiskCurveConfig(BaseModel):
    step: float = Field(default=0.1, gt=0.0)


class BoxConfig(BaseModel):
    min_group_size: int = Field(default=2, ge=1)


class ClusteringConfig(BaseModel):
    enabled: bool = True
    k: int = Field(default=3, ge=1)
    max_iter: int = Field(default=100, ge=1)
    random_seed: int = Field(default=42, ge=0)
    labels: list[str] = Field(default_factory=lambda: ["Low risk", "Medium risk", "High risk"])

    @model_validator(mode="after")
    def _check_labels(self) -> ClusteringConfig:
        if len(self.labels) != self.k:
            raise ValueError("clustering.labels must have exactly k entries")
        return self


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)
    age_groups: AgeGroupsConfig = Field(default_factory=AgeGroupsConfig)
    density: DensityConfig = Field(default_factory=DensityConfig)
    histogram: HistogramConfig = Field(default_factory=HistogramConfig)
    risk_curve: RiskCurveConfig = Field(default_factory=RiskCurveConfig)
    box: BoxConfig = Field(default_factory=BoxConfig)
    clustering: ClusteringConfig = Field(default_factory=ClusteringConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return AppConfig.model_validate(data)
