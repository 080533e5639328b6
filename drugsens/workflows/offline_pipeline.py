#!filepath: drugsens/workflows/offline_pipeline.py
from __future__ import annotations

from typing import Callable, Dict, Sequence

from drugsens.config.app_config import AppConfig
from drugsens.engines.models.registry import validate_models
from drugsens.engines.strategy_engine import resolve_strategy, validate_tiers
from drugsens.observability.instrumentation import Instrumentation
from drugsens.pipeline.pipeline import Pipeline
from drugsens.pipeline.step import PipelineStep
from drugsens.steps.encode_step import EncodeStep
from drugsens.steps.model_train_step import ModelTrainStep
from drugsens.steps.preprocess_step import PreprocessStep
from drugsens.steps.report_step import ReportStep
from drugsens.steps.split_step import SplitStep
from drugsens.utils.errors import ConfigurationError
from drugsens.utils.path import PathManager

# Semantic order (fixed):
#   preprocess → split → encode → train → report
STAGE_ORDER = ("preprocess", "split", "encode", "train", "report")

_STEP_FACTORIES: Dict[str, Callable[[Instrumentation], PipelineStep]] = {
    "preprocess": lambda inst: PreprocessStep(inst=inst),
    "split": lambda inst: SplitStep(inst=inst),
    "encode": lambda inst: EncodeStep(inst=inst),
    "train": lambda inst: ModelTrainStep(inst=inst),
    "report": lambda inst: ReportStep(inst=inst),
}


def validate_config(cfg: AppConfig) -> None:
    """
    Everything that can be rejected without reading data.
    """
    for name in cfg.encoding.strategies:
        resolve_strategy(name)
    validate_tiers(cfg.tiers.as_dict())
    validate_models(cfg.training.models)

    if cfg.data.target_column in cfg.tiers.all_columns():
        raise ConfigurationError(
            f"Target column '{cfg.data.target_column}' is listed as a categorical tier column"
        )


def build_pipeline(
    cfg: AppConfig | None = None,
    *,
    stages: Sequence[str] = STAGE_ORDER,
    inst: Instrumentation | None = None,
) -> Pipeline:
    """
    Offline drug-sensitivity pipeline.

    stages selects a subset (kept in semantic order); each step refuses to
    run when its upstream artifact is missing.
    """
    cfg = cfg or AppConfig.load()

    unknown = [s for s in stages if s not in _STEP_FACTORIES]
    if unknown:
        raise ConfigurationError(f"Unknown pipeline stages: {unknown}. Available: {STAGE_ORDER}")

    validate_config(cfg)

    inst = inst or Instrumentation()
    pm = PathManager(cfg.paths.output_dir)

    steps = [_STEP_FACTORIES[s](inst) for s in STAGE_ORDER if s in stages]

    return Pipeline(steps=steps, cfg=cfg, pm=pm, inst=inst)
