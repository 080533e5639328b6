# drugsens/engines/encoders/onehot.py
from __future__ import annotations

from typing import Dict, Sequence, Tuple

import pandas as pd

from drugsens.engines.encoders.base import (
    CategoricalEncoder,
    labels_of,
    replace_columns,
    require_columns,
    safe_token,
    sorted_categories,
)
from drugsens.engines.encoders.mapping import OneHotMapping
from drugsens.utils.errors import ConfigurationError


def indicator_names(column: str, categories: Sequence[str]) -> list[str]:
    """
    k categories → k-1 indicator names (the lexicographically last is dropped).
    Names are deterministic in (column, categories); collisions get _2, _3 ...
    """
    names: list[str] = []
    seen: Dict[str, int] = {}
    for cat in list(categories)[:-1]:
        base = f"{column}_{safe_token(cat)}"
        n = seen.get(base, 0) + 1
        seen[base] = n
        names.append(base if n == 1 else f"{base}_{n}")
    return names


class OneHotEncoder(CategoricalEncoder):
    """
    OneHotEncoder（drop-one）

    - fit: sorted distinct non-missing, non-empty labels per column
    - k categories → k-1 binary indicators; k <= 1 → no indicator at all
    - apply: values outside the stored list (unseen / missing) → all zeros,
      i.e. the implicit reference category. Never refits.
    """

    name = "onehot"

    def fit(
        self,
        df: pd.DataFrame,
        columns: Sequence[str],
        target_column: str | None = None,
    ) -> Tuple[pd.DataFrame, OneHotMapping]:
        require_columns(df, columns, "OneHotEncoder")

        categories = {
            col: sorted_categories(labels_of(df[col]))
            for col in columns
        }
        mapping = OneHotMapping(categories=categories)

        return self._encode(df, columns, mapping), mapping

    def apply(self, df: pd.DataFrame, columns: Sequence[str], mapping: OneHotMapping) -> pd.DataFrame:
        require_columns(df, columns, "OneHotEncoder")
        unknown = [c for c in columns if c not in mapping.categories]
        if unknown:
            raise ConfigurationError(f"[OneHotEncoder] no mapping for columns: {unknown}")

        return self._encode(df, columns, mapping)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _encode(df: pd.DataFrame, columns: Sequence[str], mapping: OneHotMapping) -> pd.DataFrame:
        encoded = {}
        for col in columns:
            cats = mapping.categories[col]
            labels = labels_of(df[col])
            for name, cat in zip(indicator_names(col, cats), cats):
                encoded[name] = (labels == cat).astype("int64")

        return replace_columns(df, columns, pd.DataFrame(encoded, index=df.index))
