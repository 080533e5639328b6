# drugsens/steps/split_step.py
from __future__ import annotations

import pandas as pd

from drugsens.engines.split_engine import SplitEngine, SplitRecord
from drugsens.pipeline.context import PipelineContext
from drugsens.pipeline.step import PipelineStep
from drugsens.utils.errors import ConfigurationError
from drugsens.utils.filesystem import FileSystem
from drugsens.utils.logger import logs

# |mean_train - mean_test| / sd_train at or above this → warning
MEAN_SHIFT_TOLERANCE = 0.1


class SplitStep(PipelineStep):
    """
    SplitStep

    Contract:
    - a persisted split that matches (n, ratio, seed) is reused as-is
    - a persisted split that does NOT match is a configuration error,
      unless ctx.force is set
    - writes split_indices.json + train_raw / test_raw parquet
    """

    stage = "split"
    upstream_stage = "preprocess"

    def __init__(self, *, inst=None, engine: SplitEngine | None = None):
        super().__init__(inst)
        self.engine = engine or SplitEngine()

    def run(self, ctx: PipelineContext) -> PipelineContext:
        with self.timed():
            cleaned = ctx.cleaned
            if cleaned is None:
                cleaned = FileSystem.read_parquet(self.require(ctx.pm.cleaned_file()))

            ratio = ctx.cfg.data.train_ratio
            seed = ctx.cfg.data.seed

            with self.inst.timer("split/resolve"):
                record = self._resolve_record(ctx, n=len(cleaned), ratio=ratio, seed=seed)

            train = cleaned.iloc[list(record.train_indices)].reset_index(drop=True)
            test = cleaned.iloc[list(record.test_indices)].reset_index(drop=True)

            with self.inst.timer("split/write"):
                FileSystem.write_parquet(ctx.pm.train_raw_file(), train)
                FileSystem.write_parquet(ctx.pm.test_raw_file(), test)

            logs.info(
                f"[SplitStep] seed={record.seed} ratio={record.ratio} "
                f"train={record.n_train} test={record.n_test}"
            )
            self.quality_check(train, test, ctx.cfg.data.target_column)

            ctx.split = record
            return ctx

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _resolve_record(self, ctx: PipelineContext, *, n: int, ratio: float, seed: int) -> SplitRecord:
        path = ctx.pm.split_file()

        if path.exists():
            existing = SplitRecord.from_dict(FileSystem.read_json(path))
            if existing.matches(n=n, ratio=ratio, seed=seed):
                logs.info(f"[SplitStep] reusing persisted split {path}")
                return existing

            if not ctx.force:
                raise ConfigurationError(
                    f"Persisted split {path} was made with n={existing.n_total} "
                    f"ratio={existing.ratio} seed={existing.seed}, current run has "
                    f"n={n} ratio={ratio} seed={seed}. Re-run with --force to regenerate."
                )
            logs.warning(f"[SplitStep] --force: regenerating split {path}")

        record = self.engine.make_record(n, ratio, seed)
        FileSystem.write_json(path, record.to_dict())
        return record

    @staticmethod
    def quality_check(train: pd.DataFrame, test: pd.DataFrame, target_column: str) -> bool:
        """
        Compare target distributions of both sides. Returns False (and warns)
        when the means differ by at least 10% of the training sd.
        """
        y_train = pd.to_numeric(train[target_column], errors="coerce")
        y_test = pd.to_numeric(test[target_column], errors="coerce")

        m_train, s_train = y_train.mean(), y_train.std()
        m_test, s_test = y_test.mean(), y_test.std()

        logs.info(
            f"[SplitStep] {target_column} train mean={m_train:.4f} sd={s_train:.4f} | "
            f"test mean={m_test:.4f} sd={s_test:.4f}"
        )

        if pd.isna(m_train) or pd.isna(m_test) or pd.isna(s_train):
            return True

        if abs(m_train - m_test) >= MEAN_SHIFT_TOLERANCE * s_train:
            logs.warning(
                f"[SplitStep] train / test {target_column} distributions differ "
                f"(|Δmean|={abs(m_train - m_test):.4f} >= {MEAN_SHIFT_TOLERANCE} * sd)"
            )
            return False
        return True
