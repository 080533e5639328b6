#!filepath: drugsens/pipeline/pipeline.py
from __future__ import annotations

from datetime import datetime
from typing import List

from drugsens.config.app_config import AppConfig
from drugsens.observability.instrumentation import Instrumentation, NoOpInstrumentation
from drugsens.pipeline.context import PipelineContext
from drugsens.pipeline.step import PipelineStep
from drugsens.utils.filesystem import FileSystem
from drugsens.utils.logger import logs
from drugsens.utils.path import PathManager


class Pipeline:
    """
    Pipeline = 调度器（Scheduler）

    - Pipeline 负责 orchestration（顺序 / 上下文）
    - Pipeline 不负责任何 Step 级计时
    - Step 自己定义时间语义边界（via PipelineStep.timed）
    """

    def __init__(
        self,
        steps: List[PipelineStep],
        cfg: AppConfig,
        pm: PathManager,
        inst: Instrumentation | NoOpInstrumentation,
    ):
        self.steps = steps
        self.cfg = cfg
        self.pm = pm
        self.inst = inst

    def new_context(self, run_id: str | None = None, *, force: bool = False) -> PipelineContext:
        return PipelineContext(
            run_id=run_id or datetime.now().strftime("%Y%m%d_%H%M%S"),
            cfg=self.cfg,
            pm=self.pm,
            inst=self.inst,
            force=force,
        )

    def run(self, run_id: str | None = None, *, force: bool = False) -> PipelineContext:
        ctx = self.new_context(run_id, force=force)

        logs.info(
            f"[Pipeline] ====== START run_id={ctx.run_id} "
            f"steps={[s.step_name for s in self.steps]} ======"
        )

        FileSystem.ensure_dir(self.pm.data_dir())
        FileSystem.ensure_dir(self.pm.tables_dir())
        FileSystem.ensure_dir(self.pm.models_dir())

        for step in self.steps:
            ctx = step.run(ctx)

        # timeline 只包含 leaf（由 Step 写入）
        self.inst.generate_timeline_report(ctx.run_id)
        logs.info(f"[Pipeline] ====== DONE run_id={ctx.run_id} ======")

        return ctx
