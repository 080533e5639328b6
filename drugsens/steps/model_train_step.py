# drugsens/steps/model_train_step.py
from __future__ import annotations

import joblib

from drugsens.engines.model_runner_engine import ModelRunnerEngine
from drugsens.pipeline.context import PipelineContext
from drugsens.pipeline.step import PipelineStep
from drugsens.utils.filesystem import FileSystem
from drugsens.utils.logger import logs


class ModelTrainStep(PipelineStep):
    """
    ModelTrainStep

    Contract:
    - consumes train_<s>.parquet / test_<s>.parquet for every strategy
    - produces tables/model_results.csv (one row per strategy × model)
    - persists fitted models as models/<model>_<strategy>.joblib
    """

    stage = "train"
    upstream_stage = "encode"

    def __init__(self, *, inst=None, engine: ModelRunnerEngine | None = None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: PipelineContext) -> PipelineContext:
        with self.timed():
            cfg = ctx.cfg
            pm = ctx.pm

            engine = self.engine or ModelRunnerEngine(
                models=list(cfg.training.models),
                target_column=cfg.data.target_column,
                model_params=dict(cfg.training.model_params),
                seed=cfg.data.seed,
                n_jobs=cfg.training.n_jobs,
                cv_folds=cfg.training.cv_folds,
            )

            strategies = list(cfg.encoding.strategies)

            # every strategy's inputs must exist before the first fit
            inputs = {
                s: (
                    self.require(pm.train_encoded_file(s)),
                    self.require(pm.test_encoded_file(s)),
                )
                for s in strategies
            }

            logs.info(
                f"[ModelTrainStep] models={list(engine.models)} strategies={strategies} "
                f"combinations={len(engine.models) * len(strategies)}"
            )

            outcomes = []
            for strategy, (train_path, test_path) in inputs.items():
                train = FileSystem.read_parquet(train_path)
                test = FileSystem.read_parquet(test_path)

                with self.inst.timer(f"train/{strategy}"):
                    strategy_outcomes = engine.run_strategy(strategy, train, test)

                if cfg.training.save_models:
                    for outcome in strategy_outcomes:
                        if outcome.model is None:
                            continue
                        path = pm.model_file(outcome.row["model"], strategy)
                        FileSystem.ensure_dir(path.parent)
                        joblib.dump(outcome.model, path)

                outcomes.extend(strategy_outcomes)

            results = ModelRunnerEngine.to_frame(outcomes)
            FileSystem.write_csv(pm.results_file(), results)

            n_skipped = int((results["status"] == "skipped").sum())
            ctx.inst.metrics.record("train/skipped", n_skipped)
            if n_skipped:
                logs.warning(f"[ModelTrainStep] {n_skipped} combinations skipped, see {pm.results_file()}")

            logs.info(f"[ModelTrainStep] results saved: {pm.results_file()}")

            ctx.results = results
            return ctx
