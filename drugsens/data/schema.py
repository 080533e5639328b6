# drugsens/data/schema.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable

import numpy as np
import pandas as pd

from drugsens.utils.errors import EmptyDataset, InputError, MissingColumnError
from drugsens.utils.logger import logs


class ColumnKind(str, Enum):
    CATEGORICAL = "categorical"
    NUMERIC = "numeric"
    NULLABLE_NUMERIC = "nullable_numeric"


@dataclass(frozen=True)
class DatasetSchema:
    """
    DatasetSchema（显式 schema）

    Every column the pipeline uses is declared here at load time.
    Encoders only ever see declared-categorical columns.
    """

    columns: Dict[str, ColumnKind] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        *,
        categorical: Iterable[str],
        target: str,
        numeric: Iterable[str] = (),
    ) -> "DatasetSchema":
        columns: Dict[str, ColumnKind] = {}
        for col in categorical:
            columns[col] = ColumnKind.CATEGORICAL
        for col in numeric:
            columns[col] = ColumnKind.NUMERIC
        columns[target] = ColumnKind.NULLABLE_NUMERIC
        return cls(columns=columns)

    def names(self, kind: ColumnKind | None = None) -> list[str]:
        return [c for c, k in self.columns.items() if kind is None or k == kind]

    # ------------------------------------------------------------------
    # Coercion
    # ------------------------------------------------------------------
    def apply(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Return a new frame restricted to declared columns, with types coerced.

        - categorical     → string, "" / null → missing
        - numeric         → float, non-numeric → NaN
        - nullable_numeric→ same as numeric (missing target is allowed)
        """
        missing = [c for c in self.columns if c not in df.columns]
        if missing:
            raise MissingColumnError(f"Declared columns not found in data: {missing}")

        dropped = [c for c in df.columns if c not in self.columns]
        if dropped:
            logs.info(f"[Schema] dropping {len(dropped)} undeclared columns: {dropped}")

        out = {}
        for col, kind in self.columns.items():
            if kind == ColumnKind.CATEGORICAL:
                out[col] = to_categorical(df[col])
            else:
                out[col] = pd.to_numeric(df[col], errors="coerce").astype(float)

        return pd.DataFrame(out, index=df.index)


def to_categorical(series: pd.Series) -> pd.Series:
    """
    Cast to string labels; empty string and null become missing (None).
    Integer-like floats (e.g. IDs read as 683665.0) are rendered as "683665".
    """

    def _label(v):
        if v is None or v is pd.NA or v is pd.NaT:
            return None
        if isinstance(v, (float, np.floating)):
            if np.isnan(v):
                return None
            if float(v).is_integer():
                return str(int(v))
        s = str(v)
        return s if s.strip() != "" else None

    # explicit object dtype: missing stays None, never coerced to NaN
    return pd.Series([_label(v) for v in series], index=series.index, dtype=object, name=series.name)


def load_dataset(path: str | Path, schema: DatasetSchema | None = None, delimiter: str = ",") -> pd.DataFrame:
    """
    读取 delimited 文件 → 显式 schema 强制类型
    """
    path = Path(path)
    if not path.exists():
        raise InputError(f"Input file not found: {path}")

    # keep raw strings; the schema decides the types
    df = pd.read_csv(path, sep=delimiter, dtype=str, keep_default_na=True)

    if len(df) == 0:
        raise EmptyDataset(f"Input file has no rows: {path}")

    logs.info(f"[Schema] loaded {path.name} rows={len(df)} cols={df.shape[1]}")

    if schema is None:
        return df
    return schema.apply(df)
