# drugsens/steps/preprocess_step.py
from __future__ import annotations

from pathlib import Path

from drugsens.data.schema import DatasetSchema, load_dataset
from drugsens.engines.cleaning_engine import CleaningEngine
from drugsens.pipeline.context import PipelineContext
from drugsens.pipeline.step import PipelineStep
from drugsens.utils.filesystem import FileSystem
from drugsens.utils.logger import logs


def schema_from_config(cfg) -> DatasetSchema:
    return DatasetSchema.build(
        categorical=cfg.tiers.all_columns(),
        target=cfg.data.target_column,
        numeric=cfg.data.numeric_columns,
    )


class PreprocessStep(PipelineStep):
    """
    PreprocessStep

    raw delimited file → explicit schema → CleaningEngine → cleaned.parquet
    """

    stage = "preprocess"
    upstream_stage = ""

    def __init__(self, *, inst=None, engine: CleaningEngine | None = None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: PipelineContext) -> PipelineContext:
        with self.timed():
            cfg = ctx.cfg
            raw_path = Path(cfg.paths.raw_data)

            with self.inst.timer("preprocess/load"):
                df = load_dataset(
                    raw_path,
                    schema=schema_from_config(cfg),
                    delimiter=cfg.data.delimiter,
                )

            if cfg.cleaning.enabled:
                engine = self.engine or CleaningEngine.from_config(cfg.cleaning)
                with self.inst.timer("preprocess/clean"):
                    df, report = engine.clean(df)
                FileSystem.write_json(ctx.pm.cleaning_report_file(), report.to_dict())
                ctx.inst.metrics.record("preprocess/rows_out", report.rows_out)
            else:
                logs.info("[PreprocessStep] cleaning disabled, keeping rows as loaded")
                df = df.reset_index(drop=True)

            with self.inst.timer("preprocess/write"):
                FileSystem.write_parquet(ctx.pm.cleaned_file(), df)

            logs.info(
                f"[PreprocessStep] cleaned rows={len(df)} cols={df.shape[1]} "
                f"→ {ctx.pm.cleaned_file()}"
            )

            ctx.cleaned = df
            return ctx
