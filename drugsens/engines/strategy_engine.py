# drugsens/engines/strategy_engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd

from drugsens.engines.encoders import (
    CategoricalEncoder,
    FrequencyEncoder,
    OneHotEncoder,
    TargetEncoder,
    mapping_from_dict,
)
from drugsens.engines.encoders.base import labels_of
from drugsens.utils.errors import (
    ColumnTierConflict,
    ConfigurationError,
    MissingColumnError,
    UnknownStrategy,
)
from drugsens.utils.logger import logs

# low-cardinality first, for determinism
TIERS: Tuple[str, ...] = ("low", "medium", "high")

STRATEGIES: Dict[str, Dict[str, str]] = {
    "onehot_only":        {"low": "onehot", "medium": "onehot",    "high": "onehot"},
    "onehot_freq":        {"low": "onehot", "medium": "frequency", "high": "frequency"},
    "onehot_target":      {"low": "onehot", "medium": "target",    "high": "target"},
    "onehot_freq_target": {"low": "onehot", "medium": "frequency", "high": "target"},
}


def resolve_strategy(name: str) -> Dict[str, str]:
    if name not in STRATEGIES:
        raise UnknownStrategy(
            f"Unknown encoding strategy '{name}'. Available: {', '.join(STRATEGIES)}"
        )
    return dict(STRATEGIES[name])


def validate_tiers(column_tiers: Mapping[str, Sequence[str]]) -> Dict[str, Tuple[str, ...]]:
    """
    Normalise {tier: columns} and reject configuration errors before any fit:
    unknown tier names, a column listed in more than one tier.
    """
    unknown = [t for t in column_tiers if t not in TIERS]
    if unknown:
        raise ConfigurationError(f"Unknown cardinality tiers: {unknown}. Expected {TIERS}")

    owner: Dict[str, str] = {}
    conflicts: Dict[str, list[str]] = {}
    for tier in TIERS:
        for col in column_tiers.get(tier, ()):
            if col in owner and owner[col] != tier:
                conflicts.setdefault(col, [owner[col]]).append(tier)
            owner.setdefault(col, tier)

    if conflicts:
        detail = ", ".join(f"{c} in {t}" for c, t in conflicts.items())
        raise ColumnTierConflict(f"Columns assigned to more than one tier: {detail}")

    # de-duplicate inside a tier, keep declared order
    return {
        tier: tuple(dict.fromkeys(column_tiers.get(tier, ())))
        for tier in TIERS
    }


# ============================================================
# Mapping bundle
# ============================================================
@dataclass(frozen=True)
class TierMapping:
    encoder: str
    columns: Tuple[str, ...]
    mapping: Any

    def to_dict(self) -> dict:
        return {
            "encoder": self.encoder,
            "columns": list(self.columns),
            "mapping": self.mapping.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "TierMapping":
        return cls(
            encoder=payload["encoder"],
            columns=tuple(payload["columns"]),
            mapping=mapping_from_dict(payload["encoder"], payload["mapping"]),
        )


@dataclass(frozen=True)
class MappingBundle:
    """
    All per-tier mappings of one strategy, keyed by tier.
    Enough to replay the exact transformation on new data.
    """

    strategy: str
    target_column: str
    tiers: Dict[str, TierMapping] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy,
            "target_column": self.target_column,
            "tiers": {tier: tm.to_dict() for tier, tm in self.tiers.items()},
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "MappingBundle":
        return cls(
            strategy=payload["strategy"],
            target_column=payload["target_column"],
            tiers={t: TierMapping.from_dict(tm) for t, tm in payload["tiers"].items()},
        )


@dataclass(frozen=True)
class EncodingResult:
    strategy: str
    train_matrix: pd.DataFrame
    test_matrix: pd.DataFrame
    mappings: MappingBundle
    # "<tier>/<column>" -> test rows that hit the fallback policy
    fallback_counts: Dict[str, int] = field(default_factory=dict)

    def __iter__(self):
        # (train_matrix, test_matrix, mapping_bundle)
        return iter((self.train_matrix, self.test_matrix, self.mappings))


# ============================================================
# Composer
# ============================================================
class StrategyComposer:
    """
    StrategyComposer

    Responsibility:
    - resolve strategy name → {tier: encoder}
    - per tier (low → medium → high): fit on train, apply SAME mapping to test
    - collect mappings into a MappingBundle keyed by tier

    Contract:
    - configuration errors are raised before anything is fitted
    - test rows never reach a fit() call
    """

    def __init__(
        self,
        *,
        n_folds: int = 5,
        min_samples_leaf: float = 20,
        smoothing: float = 10,
        frequency_tie_break: float = 1e-10,
        seed: int | None = None,
    ):
        self.seed = seed
        self._encoders: Dict[str, CategoricalEncoder] = {
            "onehot": OneHotEncoder(),
            "frequency": FrequencyEncoder(tie_break=frequency_tie_break),
            "target": TargetEncoder(
                n_folds=n_folds,
                min_samples_leaf=min_samples_leaf,
                smoothing=smoothing,
                seed=seed,
            ),
        }

    @classmethod
    def from_config(cls, encoding_cfg, seed: int) -> "StrategyComposer":
        return cls(
            n_folds=encoding_cfg.n_folds,
            min_samples_leaf=encoding_cfg.min_samples_leaf,
            smoothing=encoding_cfg.smoothing,
            frequency_tie_break=encoding_cfg.frequency_tie_break,
            seed=seed,
        )

    def encoder(self, name: str) -> CategoricalEncoder:
        return self._encoders[name]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def encode(
        self,
        train: pd.DataFrame,
        test: pd.DataFrame,
        strategy_name: str,
        column_tiers: Mapping[str, Sequence[str]],
        target_column: str,
    ) -> EncodingResult:
        assignment = resolve_strategy(strategy_name)
        tiers = validate_tiers(column_tiers)
        self._check_columns(train, test, tiers, target_column)

        train_out, test_out = train, test
        # one fold generator per encode call, advancing across tiers
        rng = np.random.default_rng(self.seed)
        tier_mappings: Dict[str, TierMapping] = {}
        fallbacks: Dict[str, int] = {}

        for tier in TIERS:
            columns = tiers[tier]
            if not columns:
                continue

            enc_name = assignment[tier]
            encoder = self._encoders[enc_name]

            # unseen counts are measured on the raw test labels
            test_labels = {col: labels_of(test_out[col]) for col in columns}

            if isinstance(encoder, TargetEncoder):
                train_out, mapping = encoder.fit(train_out, columns, target_column=target_column, rng=rng)
            else:
                train_out, mapping = encoder.fit(train_out, columns, target_column=target_column)
            test_out = encoder.apply(test_out, columns, mapping)

            tier_mappings[tier] = TierMapping(encoder=enc_name, columns=columns, mapping=mapping)

            for col in columns:
                n_unseen = mapping.count_unseen(col, test_labels[col])
                fallbacks[f"{tier}/{col}"] = n_unseen
                if n_unseen:
                    logs.info(
                        f"[StrategyComposer] {strategy_name} {tier}/{col} "
                        f"encoder={enc_name} fallback rows={n_unseen}"
                    )

            logs.debug(
                f"[StrategyComposer] {strategy_name} tier={tier} encoder={enc_name} "
                f"columns={len(columns)} train_cols={train_out.shape[1]}"
            )

        bundle = MappingBundle(
            strategy=strategy_name,
            target_column=target_column,
            tiers=tier_mappings,
        )

        return EncodingResult(
            strategy=strategy_name,
            train_matrix=train_out,
            test_matrix=test_out,
            mappings=bundle,
            fallback_counts=fallbacks,
        )

    def replay(self, df: pd.DataFrame, bundle: MappingBundle) -> pd.DataFrame:
        """
        Apply a persisted bundle to new rows (inference-time). Never fits.
        """
        out = df
        for tier in TIERS:
            tm = bundle.tiers.get(tier)
            if tm is None:
                continue
            out = self._encoders[tm.encoder].apply(out, tm.columns, tm.mapping)
        return out

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _check_columns(
        train: pd.DataFrame,
        test: pd.DataFrame,
        tiers: Mapping[str, Sequence[str]],
        target_column: str,
    ) -> None:
        if target_column not in train.columns:
            raise MissingColumnError(f"Target column '{target_column}' not found in training data")

        wanted = [c for cols in tiers.values() for c in cols]
        if target_column in wanted:
            raise ConfigurationError(f"Target column '{target_column}' cannot be a categorical tier column")

        for name, frame in (("train", train), ("test", test)):
            missing = [c for c in wanted if c not in frame.columns]
            if missing:
                raise MissingColumnError(f"Tier columns missing from {name} data: {missing}")
