# drugsens/engines/encoders/base.py
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Sequence, Tuple

import pandas as pd

from drugsens.data.schema import to_categorical
from drugsens.utils.errors import ConfigurationError, MissingColumnError


class CategoricalEncoder(ABC):
    """
    CategoricalEncoder（FINAL）

    Contract:
    - fit(train_slice, columns)             -> (train_matrix, mapping)
    - apply(test_slice, columns, mapping)   -> test_matrix

    Rules:
    - Never mutates its input; always returns a new frame
    - Row index is preserved (index-aligned with the input slice)
    - Every encoded column is dropped from the output
    - New columns are appended after the untouched columns
    - The encoder holds parameters only, never fitted state:
      the mapping is the ONLY channel from train to test
    """

    name: str = ""

    @abstractmethod
    def fit(
        self,
        df: pd.DataFrame,
        columns: Sequence[str],
        target_column: str | None = None,
    ) -> Tuple[pd.DataFrame, Any]:
        raise NotImplementedError

    @abstractmethod
    def apply(self, df: pd.DataFrame, columns: Sequence[str], mapping: Any) -> pd.DataFrame:
        raise NotImplementedError


# ----------------------------------------------------------------------
# Shared helpers
# ----------------------------------------------------------------------
def require_columns(df: pd.DataFrame, columns: Sequence[str], who: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise MissingColumnError(f"[{who}] columns not found: {missing}")


def labels_of(series: pd.Series) -> pd.Series:
    """Normalised category labels (str), missing → None."""
    return to_categorical(series)


def sorted_categories(labels: pd.Series) -> Tuple[str, ...]:
    """
    Distinct non-missing labels in lexicographic code-point order
    (identical to UTF-8 byte order).
    """
    return tuple(sorted(set(labels.dropna().tolist())))


def replace_columns(df: pd.DataFrame, columns: Sequence[str], encoded: pd.DataFrame) -> pd.DataFrame:
    """
    Drop the original categorical columns and append encoded ones.
    """
    kept = df.drop(columns=list(columns))

    clash = [c for c in encoded.columns if c in kept.columns]
    if clash:
        raise ConfigurationError(f"Encoded column names clash with existing columns: {clash}")

    return pd.concat([kept, encoded], axis=1)


_UNSAFE = re.compile(r"[^0-9A-Za-z_.]")


def safe_token(label: str) -> str:
    """
    Deterministic column-name token for a category label:
    unsafe characters → ".", leading digit (or ".digit") gets an "X" prefix.
    """
    token = _UNSAFE.sub(".", label)
    if token == "" or token[0].isdigit() or (token[0] == "." and token[1:2].isdigit()):
        token = "X" + token
    return token
