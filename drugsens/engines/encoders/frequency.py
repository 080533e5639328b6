# drugsens/engines/encoders/frequency.py
from __future__ import annotations

from typing import Sequence, Tuple

import pandas as pd

from drugsens.engines.encoders.base import (
    CategoricalEncoder,
    labels_of,
    replace_columns,
    require_columns,
    sorted_categories,
)
from drugsens.engines.encoders.mapping import FrequencyMapping, FrequencyTable
from drugsens.utils.errors import ConfigurationError

SUFFIX = "_FreqEnc"
DEFAULT_TIE_BREAK = 1e-10


class FrequencyEncoder(CategoricalEncoder):
    """
    FrequencyEncoder

    adjusted(c) = count(c) / n_observed + rank(c) * tie_break

    - rank(c) is the 1-based position of c in the sorted label list,
      so equal frequencies never tie
    - n_observed = training rows with a non-missing label,
      raw frequencies of a column sum to 1
    - apply: unseen / missing → min adjusted frequency seen in training
    """

    name = "frequency"

    def __init__(self, tie_break: float = DEFAULT_TIE_BREAK):
        if tie_break <= 0:
            raise ConfigurationError(f"frequency tie_break must be > 0, got {tie_break}")
        self.tie_break = tie_break

    def fit(
        self,
        df: pd.DataFrame,
        columns: Sequence[str],
        target_column: str | None = None,
    ) -> Tuple[pd.DataFrame, FrequencyMapping]:
        require_columns(df, columns, "FrequencyEncoder")

        tables = {col: self._fit_table(labels_of(df[col])) for col in columns}
        mapping = FrequencyMapping(tables=tables)

        return self._encode(df, columns, mapping), mapping

    def apply(self, df: pd.DataFrame, columns: Sequence[str], mapping: FrequencyMapping) -> pd.DataFrame:
        require_columns(df, columns, "FrequencyEncoder")
        unknown = [c for c in columns if c not in mapping.tables]
        if unknown:
            raise ConfigurationError(f"[FrequencyEncoder] no mapping for columns: {unknown}")

        return self._encode(df, columns, mapping)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _fit_table(self, labels: pd.Series) -> FrequencyTable:
        categories = sorted_categories(labels)
        observed = labels.dropna()
        counts = observed.value_counts()
        total = len(observed)

        cnt = tuple(int(counts[c]) for c in categories)
        freq = tuple(n / total for n in cnt)
        adjusted = tuple(
            f + rank * self.tie_break
            for rank, f in enumerate(freq, start=1)
        )

        return FrequencyTable(
            categories=categories,
            counts=cnt,
            frequency=freq,
            adjusted=adjusted,
        )

    @staticmethod
    def _encode(df: pd.DataFrame, columns: Sequence[str], mapping: FrequencyMapping) -> pd.DataFrame:
        encoded = {}
        for col in columns:
            table = mapping.tables[col]
            values = labels_of(df[col]).map(table.lookup())
            encoded[f"{col}{SUFFIX}"] = values.astype(float).fillna(table.min_adjusted)

        return replace_columns(df, columns, pd.DataFrame(encoded, index=df.index))
