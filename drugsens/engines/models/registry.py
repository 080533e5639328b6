"""
Model registry (name → factory).

Every factory takes (params, seed, n_jobs, n_features, cv_folds) and returns
an unfitted estimator exposing fit(X, y) / predict(X). Defaults here are
overridden per model by training.model_params.
"""
from __future__ import annotations

import math
from typing import Any, Callable, Dict

from sklearn.linear_model import LassoCV, LinearRegression, RidgeCV
from sklearn.model_selection import GridSearchCV
from sklearn.neighbors import KNeighborsRegressor
from sklearn.neural_network import MLPRegressor
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVR
from sklearn.tree import DecisionTreeRegressor
from sklearn.ensemble import RandomForestRegressor
from xgboost import XGBRegressor

from drugsens.utils.errors import ConfigurationError

ModelFactory = Callable[..., Any]

RIDGE_ALPHAS = tuple(10.0 ** k for k in range(-3, 5))
KNN_K_VALUES = (3, 5, 7, 10, 15)
SVR_C_VALUES = (0.1, 1, 10, 100)


def _lm(params: dict, **_) -> Any:
    return LinearRegression(**params)


def _ridge(params: dict, *, cv_folds: int, **_) -> Any:
    kw = {"alphas": RIDGE_ALPHAS, "cv": cv_folds}
    kw.update(params)
    return RidgeCV(**kw)


def _lasso(params: dict, *, seed: int, n_jobs: int, cv_folds: int, **_) -> Any:
    kw = {"cv": cv_folds, "random_state": seed, "n_jobs": n_jobs, "max_iter": 10000}
    kw.update(params)
    return LassoCV(**kw)


def _dt(params: dict, *, seed: int, **_) -> Any:
    kw = {"max_depth": 10, "random_state": seed}
    kw.update(params)
    return DecisionTreeRegressor(**kw)


def _rf(params: dict, *, seed: int, n_jobs: int, n_features: int, **_) -> Any:
    params = dict(params)
    mtry_ratio = params.pop("mtry_ratio", 1 / 3)
    kw = {
        "n_estimators": 500,
        "max_features": max(1, math.floor(n_features * mtry_ratio)),
        "random_state": seed,
        "n_jobs": n_jobs,
    }
    kw.update(params)
    return RandomForestRegressor(**kw)


def _xgb(params: dict, *, seed: int, n_jobs: int, **_) -> Any:
    # fixed number of rounds, no eval set
    kw = {
        "n_estimators": 100,
        "max_depth": 6,
        "learning_rate": 0.1,
        "objective": "reg:squarederror",
        "random_state": seed,
        "n_jobs": n_jobs,
    }
    kw.update(params)
    return XGBRegressor(**kw)


def _knn(params: dict, *, n_jobs: int, cv_folds: int, **_) -> Any:
    params = dict(params)
    k_values = list(params.pop("k_values", KNN_K_VALUES))
    pipe = make_pipeline(StandardScaler(), KNeighborsRegressor(**params))
    return GridSearchCV(
        pipe,
        {"kneighborsregressor__n_neighbors": k_values},
        cv=cv_folds,
        scoring="neg_root_mean_squared_error",
        n_jobs=n_jobs,
    )


def _svr(params: dict, *, n_jobs: int, cv_folds: int, **_) -> Any:
    params = dict(params)
    c_values = list(params.pop("cost_values", SVR_C_VALUES))
    pipe = make_pipeline(StandardScaler(), SVR(**params))
    return GridSearchCV(
        pipe,
        {"svr__C": c_values},
        cv=cv_folds,
        scoring="neg_root_mean_squared_error",
        n_jobs=n_jobs,
    )


def _mlp(params: dict, *, seed: int, **_) -> Any:
    kw = {"hidden_layer_sizes": (64,), "max_iter": 500, "early_stopping": True, "random_state": seed}
    kw.update(params)
    return make_pipeline(StandardScaler(), MLPRegressor(**kw))


def _deep_mlp(params: dict, *, seed: int, **_) -> Any:
    kw = {"hidden_layer_sizes": (128, 64, 32), "max_iter": 500, "early_stopping": True, "random_state": seed}
    kw.update(params)
    return make_pipeline(StandardScaler(), MLPRegressor(**kw))


_MODEL_REGISTRY: Dict[str, ModelFactory] = {
    "lm": _lm,
    "ridge": _ridge,
    "lasso": _lasso,
    "dt": _dt,
    "rf": _rf,
    "xgb": _xgb,
    "knn": _knn,
    "svr": _svr,
    "mlp": _mlp,
    "deep_mlp": _deep_mlp,
}


def available_models() -> list[str]:
    return list(_MODEL_REGISTRY)


def validate_models(names) -> None:
    unknown = [n for n in names if n not in _MODEL_REGISTRY]
    if unknown:
        raise ConfigurationError(
            f"Unknown models: {unknown}. Available: {', '.join(_MODEL_REGISTRY)}"
        )


def resolve_model(
    name: str,
    *,
    params: dict | None = None,
    seed: int = 42,
    n_jobs: int = -1,
    n_features: int = 1,
    cv_folds: int = 10,
) -> Any:
    if name not in _MODEL_REGISTRY:
        available = ", ".join(_MODEL_REGISTRY)
        raise ConfigurationError(f"No model registered as '{name}'. Available: {available}")

    return _MODEL_REGISTRY[name](
        dict(params or {}),
        seed=seed,
        n_jobs=n_jobs,
        n_features=n_features,
        cv_folds=cv_folds,
    )
