# drugsens/steps/encode_step.py
from __future__ import annotations

import pandas as pd

from drugsens.engines.strategy_engine import (
    StrategyComposer,
    resolve_strategy,
    validate_tiers,
)
from drugsens.pipeline.context import PipelineContext
from drugsens.pipeline.step import PipelineStep
from drugsens.utils.filesystem import FileSystem
from drugsens.utils.logger import logs

SUMMARY_COLUMNS = ["strategy", "train_rows", "train_cols", "test_rows", "test_cols", "fallback_count"]


class EncodeStep(PipelineStep):
    """
    EncodeStep

    For every configured strategy:
      train_raw / test_raw → StrategyComposer → train_<s>.parquet, test_<s>.parquet,
      mapping_<s>.json
    Then tables/encoding_summary.csv.

    All strategy names and tier lists are validated before the first fit.
    """

    stage = "encode"
    upstream_stage = "split"

    def __init__(self, *, inst=None, composer: StrategyComposer | None = None):
        super().__init__(inst)
        self.composer = composer

    def run(self, ctx: PipelineContext) -> PipelineContext:
        with self.timed():
            cfg = ctx.cfg
            pm = ctx.pm

            strategies = list(cfg.encoding.strategies)
            for name in strategies:
                resolve_strategy(name)
            tiers = validate_tiers(cfg.tiers.as_dict())

            train = FileSystem.read_parquet(self.require(pm.train_raw_file()))
            test = FileSystem.read_parquet(self.require(pm.test_raw_file()))

            composer = self.composer or StrategyComposer.from_config(cfg.encoding, seed=cfg.data.seed)

            summary = []
            for strategy in strategies:
                with self.inst.timer(f"encode/{strategy}"):
                    result = composer.encode(
                        train,
                        test,
                        strategy,
                        tiers,
                        cfg.data.target_column,
                    )

                    FileSystem.write_parquet(pm.train_encoded_file(strategy), result.train_matrix)
                    FileSystem.write_parquet(pm.test_encoded_file(strategy), result.test_matrix)
                    FileSystem.write_json(pm.mapping_file(strategy), result.mappings.to_dict())

                for key, count in result.fallback_counts.items():
                    ctx.inst.metrics.increment(f"fallback/{strategy}/{key}", count)

                n_fallback = int(sum(result.fallback_counts.values()))
                summary.append(
                    {
                        "strategy": strategy,
                        "train_rows": result.train_matrix.shape[0],
                        "train_cols": result.train_matrix.shape[1],
                        "test_rows": result.test_matrix.shape[0],
                        "test_cols": result.test_matrix.shape[1],
                        "fallback_count": n_fallback,
                    }
                )
                logs.info(
                    f"[EncodeStep] {strategy}: train={result.train_matrix.shape} "
                    f"test={result.test_matrix.shape} fallback={n_fallback}"
                )

            summary_df = pd.DataFrame(summary, columns=SUMMARY_COLUMNS)
            FileSystem.write_csv(pm.encoding_summary_file(), summary_df)

            ctx.encoding_summary = summary_df
            return ctx
