# drugsens/engines/encoders/target.py
from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from drugsens.engines.encoders.base import (
    CategoricalEncoder,
    labels_of,
    replace_columns,
    require_columns,
)
from drugsens.engines.encoders.mapping import TargetMapping, TargetTable
from drugsens.utils.errors import ConfigurationError, InputError, MissingColumnError

SUFFIX = "_TargetEnc"


def smoothing_weight(count, min_samples_leaf: float, smoothing: float):
    """
    λ = sigmoid((count - min_samples_leaf) / smoothing), monotonic in count, in [0, 1].
    """
    return 1.0 / (1.0 + np.exp(-(np.asarray(count, dtype=float) - min_samples_leaf) / smoothing))


def smoothed_stats(
    labels: pd.Series,
    target: pd.Series,
    *,
    prior: float,
    min_samples_leaf: float,
    smoothing: float,
) -> TargetTable:
    """
    Per-category (count, mean, smoothed_mean) over the given rows.

    - count includes rows whose target is missing
    - mean ignores missing targets; a category without any observed
      target gets smoothed = prior
    - missing labels form no category
    """
    frame = pd.DataFrame({"label": labels.values, "y": target.values})
    frame = frame[frame["label"].notna()]

    if frame.empty:
        return TargetTable(categories=(), counts=(), means=(), smoothed=())

    grouped = frame.groupby("label", sort=False)["y"]
    counts = grouped.size()
    means = grouped.mean()

    categories = tuple(sorted(counts.index.tolist()))
    counts = counts.reindex(categories)
    means = means.reindex(categories)

    lam = smoothing_weight(counts.values, min_samples_leaf, smoothing)
    smoothed = lam * means.values + (1.0 - lam) * prior
    smoothed = np.where(np.isnan(smoothed), prior, smoothed)

    return TargetTable(
        categories=categories,
        counts=tuple(int(c) for c in counts.values),
        means=tuple(float(m) for m in means.values),
        smoothed=tuple(float(s) for s in smoothed),
    )


class TargetEncoder(CategoricalEncoder):
    """
    TargetEncoder（k-fold smoothed mean encoding）

    Train matrix (out-of-fold):
      rows are randomly assigned to n_folds balanced folds; rows of fold k
      are encoded with statistics from rows OUTSIDE fold k, smoothed towards
      that subset's own mean G_k. No row's value ever derives from its own target.

    Mapping (for test / inference):
      same smoothing over the ENTIRE training slice, prior = G (training mean).
      Deliberately different from the fold-wise train values.

    apply: lookup smoothed mean, unseen / missing → G.
    """

    name = "target"

    def __init__(
        self,
        n_folds: int = 5,
        min_samples_leaf: float = 20,
        smoothing: float = 10,
        seed: int | None = None,
    ):
        if int(n_folds) != n_folds or n_folds < 2:
            raise ConfigurationError(f"n_folds must be an integer >= 2, got {n_folds}")
        if smoothing <= 0:
            raise ConfigurationError(f"smoothing must be > 0, got {smoothing}")

        self.n_folds = int(n_folds)
        self.min_samples_leaf = float(min_samples_leaf)
        self.smoothing = float(smoothing)
        self.seed = seed

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def fit(
        self,
        df: pd.DataFrame,
        columns: Sequence[str],
        target_column: str | None = None,
        rng: np.random.Generator | None = None,
    ) -> Tuple[pd.DataFrame, TargetMapping]:
        """
        rng: fold generator shared by the caller across fit calls;
        a fresh default_rng(seed) when omitted.
        """
        if target_column is None:
            raise ConfigurationError("[TargetEncoder] target_column is required for fit")
        if target_column not in df.columns:
            raise MissingColumnError(f"[TargetEncoder] target column not found: {target_column}")
        require_columns(df, columns, "TargetEncoder")
        if target_column in columns:
            raise ConfigurationError(f"[TargetEncoder] cannot encode the target column itself: {target_column}")

        target = pd.to_numeric(df[target_column], errors="coerce").astype(float)
        global_mean = float(np.nanmean(target.values)) if target.notna().any() else math.nan
        if math.isnan(global_mean):
            raise InputError("[TargetEncoder] target has no observed values in training slice")

        # advances column by column
        if rng is None:
            rng = np.random.default_rng(self.seed)

        encoded = {}
        tables = {}
        for col in columns:
            labels = labels_of(df[col])

            folds = self.assign_folds(len(df), rng)
            encoded[f"{col}{SUFFIX}"] = pd.Series(
                self._out_of_fold(labels, target, folds, global_mean),
                index=df.index,
            )

            tables[col] = smoothed_stats(
                labels,
                target,
                prior=global_mean,
                min_samples_leaf=self.min_samples_leaf,
                smoothing=self.smoothing,
            )

        mapping = TargetMapping(
            tables=tables,
            global_mean=global_mean,
            params={
                "n_folds": self.n_folds,
                "min_samples_leaf": self.min_samples_leaf,
                "smoothing": self.smoothing,
            },
        )

        return replace_columns(df, columns, pd.DataFrame(encoded, index=df.index)), mapping

    def apply(self, df: pd.DataFrame, columns: Sequence[str], mapping: TargetMapping) -> pd.DataFrame:
        require_columns(df, columns, "TargetEncoder")
        unknown = [c for c in columns if c not in mapping.tables]
        if unknown:
            raise ConfigurationError(f"[TargetEncoder] no mapping for columns: {unknown}")

        encoded = {}
        for col in columns:
            values = labels_of(df[col]).map(mapping.tables[col].lookup())
            encoded[f"{col}{SUFFIX}"] = values.astype(float).fillna(mapping.global_mean)

        return replace_columns(df, columns, pd.DataFrame(encoded, index=df.index))

    def assign_folds(self, n: int, rng: np.random.Generator) -> np.ndarray:
        """
        Balanced random fold labels 0..n_folds-1 (sizes differ by at most 1).
        """
        return rng.permutation(np.arange(n) % self.n_folds)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _out_of_fold(
        self,
        labels: pd.Series,
        target: pd.Series,
        folds: np.ndarray,
        global_mean: float,
    ) -> np.ndarray:
        result = np.empty(len(labels), dtype=float)
        label_values = labels.values

        for k in range(self.n_folds):
            in_fold = folds == k
            if not in_fold.any():
                continue
            out_fold = ~in_fold

            out_target = target.values[out_fold]
            fold_mean = float(np.nanmean(out_target)) if np.any(~np.isnan(out_target)) else global_mean

            table = smoothed_stats(
                labels[out_fold],
                target[out_fold],
                prior=fold_mean,
                min_samples_leaf=self.min_samples_leaf,
                smoothing=self.smoothing,
            )
            lookup = table.lookup()

            result[in_fold] = [
                lookup.get(v, fold_mean) if v is not None else fold_mean
                for v in label_values[in_fold]
            ]

        return result
