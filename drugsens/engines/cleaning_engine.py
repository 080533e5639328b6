# drugsens/engines/cleaning_engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import pandas as pd

from drugsens.utils.errors import EmptyDataset, MissingColumnError
from drugsens.utils.logger import logs


@dataclass
class CleaningReport:
    rows_in: int = 0
    rows_out: int = 0
    removed_groups: List[str] = field(default_factory=list)
    rows_removed_as_empty_shell: int = 0
    rows_dropped_missing: int = 0
    filled: Dict[str, int] = field(default_factory=dict)
    missing_rate: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "rows_in": self.rows_in,
            "rows_out": self.rows_out,
            "removed_groups": list(self.removed_groups),
            "rows_removed_as_empty_shell": self.rows_removed_as_empty_shell,
            "rows_dropped_missing": self.rows_dropped_missing,
            "filled": dict(self.filled),
            "missing_rate": dict(self.missing_rate),
        }


class CleaningEngine:
    """
    CleaningEngine（pure, no I/O）

    Order of operations:
      1. drop empty-shell groups (every row missing every shell column)
      2. fill unknown_fill_columns     → unknown_label
      3. drop rows missing any drop_if_missing_columns
      4. fill not_available_fill_columns → not_available_label

    Expects categorical columns already normalised (missing == None / NaN).
    Never mutates its input.
    """

    def __init__(
        self,
        *,
        group_column: str = "COSMIC_ID",
        empty_shell_columns: Sequence[str] = (),
        unknown_fill_columns: Sequence[str] = (),
        unknown_label: str = "Unknown",
        drop_if_missing_columns: Sequence[str] = (),
        not_available_fill_columns: Sequence[str] = (),
        not_available_label: str = "Not_Available",
    ):
        self.group_column = group_column
        self.empty_shell_columns = list(empty_shell_columns)
        self.unknown_fill_columns = list(unknown_fill_columns)
        self.unknown_label = unknown_label
        self.drop_if_missing_columns = list(drop_if_missing_columns)
        self.not_available_fill_columns = list(not_available_fill_columns)
        self.not_available_label = not_available_label

    @classmethod
    def from_config(cls, cfg) -> "CleaningEngine":
        return cls(
            group_column=cfg.group_column,
            empty_shell_columns=cfg.empty_shell_columns,
            unknown_fill_columns=cfg.unknown_fill_columns,
            unknown_label=cfg.unknown_label,
            drop_if_missing_columns=cfg.drop_if_missing_columns,
            not_available_fill_columns=cfg.not_available_fill_columns,
            not_available_label=cfg.not_available_label,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def clean(self, df: pd.DataFrame) -> tuple[pd.DataFrame, CleaningReport]:
        self._check_columns(df)

        report = CleaningReport(rows_in=len(df))
        report.missing_rate = {
            col: float(df[col].isna().mean()) for col in df.columns
        } if len(df) else {}

        out = df.copy()

        out = self._drop_empty_shells(out, report)
        out = self._fill(out, self.unknown_fill_columns, self.unknown_label, report)

        before = len(out)
        if self.drop_if_missing_columns:
            out = out.dropna(subset=self.drop_if_missing_columns)
        report.rows_dropped_missing = before - len(out)

        out = self._fill(out, self.not_available_fill_columns, self.not_available_label, report)

        out = out.reset_index(drop=True)
        report.rows_out = len(out)

        if report.rows_out == 0:
            raise EmptyDataset("[CleaningEngine] no rows left after cleaning")

        logs.info(
            f"[CleaningEngine] rows_in={report.rows_in} rows_out={report.rows_out} "
            f"empty_shell_groups={len(report.removed_groups)} "
            f"dropped_missing={report.rows_dropped_missing}"
        )
        return out, report

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _check_columns(self, df: pd.DataFrame) -> None:
        wanted = set(self.empty_shell_columns) | set(self.unknown_fill_columns)
        wanted |= set(self.drop_if_missing_columns) | set(self.not_available_fill_columns)
        if self.empty_shell_columns:
            wanted.add(self.group_column)

        missing = sorted(c for c in wanted if c not in df.columns)
        if missing:
            raise MissingColumnError(f"[CleaningEngine] columns not found: {missing}")

    def _drop_empty_shells(self, df: pd.DataFrame, report: CleaningReport) -> pd.DataFrame:
        if not self.empty_shell_columns:
            return df

        row_empty = df[self.empty_shell_columns].isna().all(axis=1)
        group_empty = row_empty.groupby(df[self.group_column], dropna=False).transform("all")
        group_empty = group_empty.astype(bool)

        removed = df.loc[group_empty, self.group_column].dropna().unique().tolist()
        report.removed_groups = [str(g) for g in removed]
        report.rows_removed_as_empty_shell = int(group_empty.sum())

        return df.loc[~group_empty]

    @staticmethod
    def _fill(df: pd.DataFrame, columns: Sequence[str], label: str, report: CleaningReport) -> pd.DataFrame:
        if not columns:
            return df

        out = df.copy()
        for col in columns:
            mask = out[col].isna()
            n = int(mask.sum())
            if n:
                out[col] = out[col].astype(object).where(~mask, label)
            report.filled[col] = report.filled.get(col, 0) + n
        return out
