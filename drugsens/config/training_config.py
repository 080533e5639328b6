# drugsens/config/training_config.py
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class TrainingConfig(BaseModel):
    """
    TrainingConfig

    model_params overrides the registry defaults per model name, e.g.
        model_params:
          rf: {n_estimators: 200}
    """

    models: List[str] = Field(
        default_factory=lambda: ["lm", "ridge", "lasso", "rf", "xgb"]
    )
    model_params: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    n_jobs: int = -1
    cv_folds: int = 10
    save_models: bool = True
