# drugsens/engines/model_runner_engine.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd

from drugsens.engines import metrics_engine
from drugsens.engines.models.registry import resolve_model, validate_models
from drugsens.utils.errors import InputError, MissingColumnError
from drugsens.utils.logger import logs

RESULT_COLUMNS = [
    "strategy",
    "model",
    "RMSE",
    "MAE",
    "R2",
    "r",
    "elapsed_sec",
    "n_features",
    "status",
    "error",
]


def prepare_features(df: pd.DataFrame, target_column: str) -> Tuple[pd.DataFrame, pd.Series]:
    """
    X = every non-target column, coerced numeric, NaN → 0
    y = target as float (may contain NaN)
    """
    if target_column not in df.columns:
        raise MissingColumnError(f"[ModelRunner] target column not found: {target_column}")

    X = df.drop(columns=[target_column]).apply(pd.to_numeric, errors="coerce")
    X = X.fillna(0.0).astype(float)
    y = pd.to_numeric(df[target_column], errors="coerce").astype(float)
    return X, y


@dataclass
class FitOutcome:
    row: Dict[str, Any]
    model: Any = None


@dataclass
class ModelRunnerEngine:
    """
    ModelRunnerEngine（glue around opaque fit / predict）

    Contract:
    - one result row per (strategy, model) attempted
    - a failing model is recorded as status="skipped" and never aborts the rest
    - training rows with missing target are dropped before fitting
    - the test slice is only ever passed to predict()
    """

    models: Sequence[str]
    target_column: str
    model_params: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    seed: int = 42
    n_jobs: int = -1
    cv_folds: int = 10

    def __post_init__(self):
        validate_models(self.models)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def run_strategy(
        self,
        strategy: str,
        train: pd.DataFrame,
        test: pd.DataFrame,
    ) -> List[FitOutcome]:
        X_train, y_train = prepare_features(train, self.target_column)
        X_test, y_test = prepare_features(test, self.target_column)

        # test columns follow the train matrix exactly
        X_test = X_test.reindex(columns=X_train.columns, fill_value=0.0)

        observed = y_train.notna().to_numpy()
        if not observed.any():
            raise InputError(f"[ModelRunner] {strategy}: no training rows with an observed target")
        dropped = int((~observed).sum())
        if dropped:
            logs.info(f"[ModelRunner] {strategy}: dropped {dropped} training rows with missing target")

        X_fit, y_fit = X_train.loc[observed], y_train.loc[observed]

        logs.info(
            f"[ModelRunner] strategy={strategy} features={X_train.shape[1]} "
            f"train_rows={len(X_fit)} test_rows={len(X_test)}"
        )

        return [
            self.fit_one(strategy, name, X_fit, y_fit, X_test, y_test)
            for name in self.models
        ]

    def fit_one(
        self,
        strategy: str,
        model_name: str,
        X_train: pd.DataFrame,
        y_train: pd.Series,
        X_test: pd.DataFrame,
        y_test: pd.Series,
    ) -> FitOutcome:
        n_features = int(X_train.shape[1])
        row: Dict[str, Any] = {
            "strategy": strategy,
            "model": model_name,
            "RMSE": np.nan,
            "MAE": np.nan,
            "R2": np.nan,
            "r": np.nan,
            "elapsed_sec": np.nan,
            "n_features": n_features,
            "status": "skipped",
            "error": "",
        }

        start = time.perf_counter()
        try:
            model = resolve_model(
                model_name,
                params=self.model_params.get(model_name),
                seed=self.seed,
                n_jobs=self.n_jobs,
                n_features=n_features,
                cv_folds=self.cv_folds,
            )
            model.fit(X_train.to_numpy(), y_train.to_numpy())
            preds = model.predict(X_test.to_numpy())
        except Exception as e:
            row["elapsed_sec"] = time.perf_counter() - start
            row["error"] = f"{type(e).__name__}: {e}"
            logs.exception(f"[ModelRunner] {strategy}/{model_name} failed, skipped")
            return FitOutcome(row=row)

        row["elapsed_sec"] = time.perf_counter() - start
        row.update(metrics_engine.evaluate(y_test.to_numpy(), preds))
        row["status"] = "ok"

        logs.info(
            f"[ModelRunner] {strategy}/{model_name} RMSE={row['RMSE']:.4f} "
            f"R2={row['R2']:.4f} time={row['elapsed_sec']:.1f}s"
        )
        return FitOutcome(row=row, model=model)

    @staticmethod
    def to_frame(outcomes: Sequence[FitOutcome]) -> pd.DataFrame:
        return pd.DataFrame([o.row for o in outcomes], columns=RESULT_COLUMNS)
