# tests/conftest.py
from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from loguru import logger

from drugsens.config.app_config import AppConfig


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def small_frame() -> pd.DataFrame:
    """
    10 rows, C = [A,A,B,B,B,C,C,C,C,D], y = 1..10
    """
    return pd.DataFrame(
        {
            "C": ["A", "A", "B", "B", "B", "C", "C", "C", "C", "D"],
            "y": [float(v) for v in range(1, 11)],
        }
    )


def _make_gdsc_like(n: int = 80, seed: int = 0) -> pd.DataFrame:
    rng = np.random.default_rng(seed)

    tissue = rng.choice(["lung", "breast", "skin"], size=n)
    site = rng.choice(["site_a", "site_b", "site_c", "site_d"], size=n)
    cell = np.array([f"{683600 + i % 10}" for i in range(n)])
    drug = rng.choice(["1001", "1002", "1003", "1004", "1005"], size=n)

    effect = {"lung": 1.0, "breast": -0.5, "skin": 0.2}
    y = np.array([effect[t] for t in tissue]) + rng.normal(0, 0.3, size=n)

    return pd.DataFrame(
        {
            "Tissue": tissue,
            "Site": site,
            "COSMIC_ID": cell,
            "DRUG_ID": drug,
            "LN_IC50": np.round(y, 4),
            "Unused": ["x"] * n,
        }
    )


@pytest.fixture
def gdsc_like_frame() -> pd.DataFrame:
    return _make_gdsc_like()


@pytest.fixture
def raw_csv(tmp_path: Path, gdsc_like_frame: pd.DataFrame) -> Path:
    path = tmp_path / "raw.csv"
    gdsc_like_frame.to_csv(path, index=False)
    return path


@pytest.fixture
def make_config(tmp_path: Path, raw_csv: Path):
    """
    Factory for a small, fully explicit AppConfig rooted under tmp_path.
    """

    def _make(**overrides) -> AppConfig:
        payload = {
            "log": {"dir": str(tmp_path / "logs")},
            "paths": {"raw_data": str(raw_csv), "output_dir": str(tmp_path / "output")},
            "data": {"target_column": "LN_IC50", "train_ratio": 0.8, "seed": 42},
            "tiers": {"low": ["Tissue"], "medium": ["Site", "DRUG_ID"], "high": ["COSMIC_ID"]},
            "cleaning": {
                "enabled": True,
                "group_column": "COSMIC_ID",
                "empty_shell_columns": ["Site"],
                "unknown_fill_columns": ["DRUG_ID"],
                "drop_if_missing_columns": ["Tissue"],
                "not_available_fill_columns": ["Site"],
            },
            "encoding": {"n_folds": 5, "min_samples_leaf": 20, "smoothing": 10},
            "training": {"models": ["lm"], "n_jobs": 1, "cv_folds": 3, "save_models": True},
        }
        for section, values in overrides.items():
            payload.setdefault(section, {}).update(values)
        return AppConfig(**payload)

    return _make
