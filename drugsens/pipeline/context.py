# drugsens/pipeline/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import pandas as pd

from drugsens.config.app_config import AppConfig
from drugsens.engines.split_engine import SplitRecord
from drugsens.observability.instrumentation import Instrumentation, NoOpInstrumentation
from drugsens.utils.path import PathManager


@dataclass
class PipelineContext:
    """
    PipelineContext（one context == one pipeline run）

    Static bindings are set once by the Pipeline; the rolling slots are
    filled by steps as they run. A step that finds its slot empty reads
    the persisted artifact instead, so steps also run standalone.
    """

    # -------------------------
    # Identity
    # -------------------------
    run_id: str

    # -------------------------
    # Static bindings
    # -------------------------
    cfg: AppConfig
    pm: PathManager
    inst: Instrumentation | NoOpInstrumentation
    force: bool = False

    # -------------------------
    # Rolling state
    # -------------------------
    cleaned: Optional[pd.DataFrame] = None
    split: Optional[SplitRecord] = None
    encoding_summary: Optional[pd.DataFrame] = None
    results: Optional[pd.DataFrame] = None
    outputs: Dict[str, Any] = field(default_factory=dict)
