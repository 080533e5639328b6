# drugsens/engines/metrics_engine.py
from __future__ import annotations

from typing import Dict, Tuple

import numpy as np
from scipy.stats import pearsonr
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score


def _paired(actual, predicted) -> Tuple[np.ndarray, np.ndarray]:
    """
    Align as float arrays and drop pairs where either side is NaN.
    """
    a = np.asarray(actual, dtype=float).ravel()
    p = np.asarray(predicted, dtype=float).ravel()
    if a.shape != p.shape:
        raise ValueError(f"[Metrics] length mismatch: actual={a.shape[0]} predicted={p.shape[0]}")

    keep = ~(np.isnan(a) | np.isnan(p))
    return a[keep], p[keep]


def rmse(actual, predicted) -> float:
    a, p = _paired(actual, predicted)
    if a.size == 0:
        return float("nan")
    return float(np.sqrt(mean_squared_error(a, p)))


def mae(actual, predicted) -> float:
    a, p = _paired(actual, predicted)
    if a.size == 0:
        return float("nan")
    return float(mean_absolute_error(a, p))


def r2(actual, predicted) -> float:
    """
    Coefficient of determination. NaN for fewer than 2 pairs or constant actual.
    """
    a, p = _paired(actual, predicted)
    # r2_score scores constant actual as 0.0 / 1.0 instead of undefined
    if a.size < 2 or np.all(a == a[0]):
        return float("nan")
    return float(r2_score(a, p))


def pearson_r(actual, predicted) -> float:
    a, p = _paired(actual, predicted)
    # pearsonr is undefined for n < 2 or constant input
    if a.size < 2 or np.all(a == a[0]) or np.all(p == p[0]):
        return float("nan")
    r, _ = pearsonr(a, p)
    return float(r)


def evaluate(actual, predicted) -> Dict[str, float]:
    return {
        "RMSE": rmse(actual, predicted),
        "MAE": mae(actual, predicted),
        "R2": r2(actual, predicted),
        "r": pearson_r(actual, predicted),
    }
