# drugsens/engines/encoders/mapping.py
"""
Encoder mappings（FINAL / FROZEN）

A mapping is the fitted state of one encoder over a set of columns,
learned from training rows only. It is immutable once fit and is the ONLY
permitted channel for information to flow from train to test.

Persisted form (JSON):
- onehot    : {column: [category, ...]}
- frequency : {column: {categories, counts, frequency, adjusted}}
- target    : {global_mean, params, columns: {column: {categories, counts, means, smoothed}}}
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Tuple

import pandas as pd

from drugsens.utils.errors import ConfigurationError


def _count_unseen(labels: pd.Series, known: Dict[str, Any]) -> int:
    return int((~labels.isin(list(known))).sum())


def _nan_to_none(v: float):
    return None if v is None or (isinstance(v, float) and math.isnan(v)) else v


def _none_to_nan(v):
    return float("nan") if v is None else float(v)


# ============================================================
# One-hot
# ============================================================
@dataclass(frozen=True)
class OneHotMapping:
    encoder: ClassVar[str] = "onehot"

    # column -> sorted category list (the last one is the dropped reference)
    categories: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    def columns(self) -> list[str]:
        return list(self.categories)

    def count_unseen(self, column: str, labels: pd.Series) -> int:
        known = dict.fromkeys(self.categories[column])
        return _count_unseen(labels, known)

    def to_dict(self) -> dict:
        return {col: list(cats) for col, cats in self.categories.items()}

    @classmethod
    def from_dict(cls, payload: dict) -> "OneHotMapping":
        return cls(categories={col: tuple(cats) for col, cats in payload.items()})


# ============================================================
# Frequency
# ============================================================
@dataclass(frozen=True)
class FrequencyTable:
    categories: Tuple[str, ...]
    counts: Tuple[int, ...]
    frequency: Tuple[float, ...]  # raw count / total
    adjusted: Tuple[float, ...]   # frequency + rank * tie_break

    def lookup(self) -> Dict[str, float]:
        return dict(zip(self.categories, self.adjusted))

    @property
    def min_adjusted(self) -> float:
        # no observed category at all → neutral 0.0
        return min(self.adjusted) if self.adjusted else 0.0

    def to_dict(self) -> dict:
        return {
            "categories": list(self.categories),
            "counts": list(self.counts),
            "frequency": list(self.frequency),
            "adjusted": list(self.adjusted),
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "FrequencyTable":
        return cls(
            categories=tuple(payload["categories"]),
            counts=tuple(int(c) for c in payload["counts"]),
            frequency=tuple(float(f) for f in payload["frequency"]),
            adjusted=tuple(float(a) for a in payload["adjusted"]),
        )


@dataclass(frozen=True)
class FrequencyMapping:
    encoder: ClassVar[str] = "frequency"

    tables: Dict[str, FrequencyTable] = field(default_factory=dict)

    def columns(self) -> list[str]:
        return list(self.tables)

    def count_unseen(self, column: str, labels: pd.Series) -> int:
        return _count_unseen(labels, self.tables[column].lookup())

    def to_dict(self) -> dict:
        return {col: t.to_dict() for col, t in self.tables.items()}

    @classmethod
    def from_dict(cls, payload: dict) -> "FrequencyMapping":
        return cls(tables={col: FrequencyTable.from_dict(t) for col, t in payload.items()})


# ============================================================
# Target
# ============================================================
@dataclass(frozen=True)
class TargetTable:
    categories: Tuple[str, ...]
    counts: Tuple[int, ...]
    means: Tuple[float, ...]      # raw category mean (NaN if no target observed)
    smoothed: Tuple[float, ...]   # λ·mean + (1-λ)·prior

    def lookup(self) -> Dict[str, float]:
        return dict(zip(self.categories, self.smoothed))

    def to_dict(self) -> dict:
        return {
            "categories": list(self.categories),
            "counts": list(self.counts),
            "means": [_nan_to_none(m) for m in self.means],
            "smoothed": list(self.smoothed),
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "TargetTable":
        return cls(
            categories=tuple(payload["categories"]),
            counts=tuple(int(c) for c in payload["counts"]),
            means=tuple(_none_to_nan(m) for m in payload["means"]),
            smoothed=tuple(float(s) for s in payload["smoothed"]),
        )


@dataclass(frozen=True)
class TargetMapping:
    encoder: ClassVar[str] = "target"

    tables: Dict[str, TargetTable] = field(default_factory=dict)
    global_mean: float = float("nan")
    params: Dict[str, float] = field(default_factory=dict)

    def columns(self) -> list[str]:
        return list(self.tables)

    def count_unseen(self, column: str, labels: pd.Series) -> int:
        return _count_unseen(labels, self.tables[column].lookup())

    def to_dict(self) -> dict:
        return {
            "global_mean": self.global_mean,
            "params": dict(self.params),
            "columns": {col: t.to_dict() for col, t in self.tables.items()},
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "TargetMapping":
        return cls(
            tables={col: TargetTable.from_dict(t) for col, t in payload["columns"].items()},
            global_mean=float(payload["global_mean"]),
            params=dict(payload.get("params", {})),
        )


MAPPING_TYPES = {
    OneHotMapping.encoder: OneHotMapping,
    FrequencyMapping.encoder: FrequencyMapping,
    TargetMapping.encoder: TargetMapping,
}


def mapping_from_dict(encoder: str, payload: dict):
    if encoder not in MAPPING_TYPES:
        raise ConfigurationError(f"Unknown encoder in mapping record: {encoder}")
    return MAPPING_TYPES[encoder].from_dict(payload)
