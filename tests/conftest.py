from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def survey_csv(tmp_path: Path) -> Path:
    rng = np.random.default_rng(2024)
    n = 240
    age = rng.uniform(2, 85, size=n).round(1)
    bmi = np.where(rng.uniform(size=n) < 0.5, rng.normal(22, 1.5, n), rng.normal(34, 1.5, n))
    hba1c = (4.6 + 0.12 * (bmi - 18) + rng.normal(0, 0.35, n)).round(1)
    diabetes = (hba1c >= 6.5).astype(int)
    diabetes[:2] = 1 - diabetes[:2]
    frame = pd.DataFrame(
        {
            "gender": rng.choice(["Male", "Female"], size=n),
            "age": age,
            "hypertension": rng.integers(0, 2, size=n),
            "bmi": bmi.round(2),
            "HbA1c_level": hba1c,
            "diabetes": diabetes,
        }
    )
    frame.loc[5, "HbA1c_level"] = np.nan
    path = tmp_path / "survey.csv"
    frame.to_csv(path, index=False)
    return path
