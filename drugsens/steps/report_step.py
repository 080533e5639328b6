# drugsens/steps/report_step.py
from __future__ import annotations

import pandas as pd

from drugsens.pipeline.context import PipelineContext
from drugsens.pipeline.step import PipelineStep
from drugsens.utils.filesystem import FileSystem
from drugsens.utils.logger import logs

TOP_N = 5


def rank_results(results: pd.DataFrame) -> pd.DataFrame:
    """
    Successful rows only, RMSE ascending (ties broken by strategy, model).
    """
    ok = results[results["status"] == "ok"]
    return ok.sort_values(["RMSE", "strategy", "model"], kind="mergesort").reset_index(drop=True)


def best_by(ranking: pd.DataFrame, key: str) -> pd.DataFrame:
    if ranking.empty:
        return ranking.copy()
    return ranking.groupby(key, sort=True).head(1).sort_values(key).reset_index(drop=True)


class ReportStep(PipelineStep):
    """
    ReportStep（thin summary, no plotting）

    model_results.csv → model_ranking.csv, best_by_strategy.csv, best_by_model.csv
    """

    stage = "report"
    upstream_stage = "train"

    def run(self, ctx: PipelineContext) -> PipelineContext:
        with self.timed():
            pm = ctx.pm

            results = ctx.results
            if results is None:
                results = pd.read_csv(self.require(pm.results_file()), keep_default_na=True)
            results = results.assign(error=results["error"].fillna(""))

            ranking = rank_results(results)

            FileSystem.write_csv(pm.ranking_file(), ranking)
            FileSystem.write_csv(pm.best_by_strategy_file(), best_by(ranking, "strategy"))
            FileSystem.write_csv(pm.best_by_model_file(), best_by(ranking, "model"))

            if ranking.empty:
                logs.warning("[ReportStep] no successful model runs to rank")
            else:
                logs.info(f"[ReportStep] top {TOP_N} by RMSE:")
                for i, row in enumerate(ranking.head(TOP_N).itertuples(index=False), start=1):
                    logs.info(
                        f"[ReportStep] #{i} {row.strategy}/{row.model} "
                        f"RMSE={row.RMSE:.4f} R2={row.R2:.4f}"
                    )

            ctx.outputs["ranking"] = ranking
            return ctx
