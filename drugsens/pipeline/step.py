from __future__ import annotations

from pathlib import Path

from drugsens.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)
from drugsens.pipeline.context import PipelineContext
from drugsens.utils.errors import MissingArtifactError


class PipelineStep:
    """
    Pipeline Step 基类

    职责：
      1. orchestration（读上游 artifact → 调 engine → 写输出）
      2. 提供 Step 级时间语义边界（parent scope）

    规则：
      - Step 本身不进入 timeline，叶子 timer 在 Step 内部
      - Step 行为不依赖 inst 是否存在
      - 上游 artifact 缺失 → MissingArtifactError（写明需要先运行的 step）
    """

    stage: str = ""           # e.g. "encode"
    upstream_stage: str = ""  # e.g. "split"

    def __init__(self, inst: Instrumentation | None = None):
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    # --------------------------------------------------
    # Step identity
    # --------------------------------------------------
    @property
    def step_name(self) -> str:
        return self.__class__.__name__

    # --------------------------------------------------
    # Step-level timer（parent scope, not recorded）
    # --------------------------------------------------
    def timed(self):
        return self.inst.timer(self.step_name, record=False)

    def require(self, path: Path, upstream_step: str | None = None) -> Path:
        if not Path(path).exists():
            raise MissingArtifactError(path, upstream_step or self.upstream_stage)
        return Path(path)

    # --------------------------------------------------
    # Contract
    # --------------------------------------------------
    def run(self, ctx: PipelineContext) -> PipelineContext:
        raise NotImplementedError
