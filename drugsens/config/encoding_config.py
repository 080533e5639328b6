#!filepath: drugsens/config/encoding_config.py
from typing import List

from pydantic import BaseModel, Field


class EncodingConfig(BaseModel):
    strategies: List[str] = Field(
        default_factory=lambda: [
            "onehot_only",
            "onehot_freq",
            "onehot_target",
            "onehot_freq_target",
        ]
    )

    # target encoding
    n_folds: int = 5
    min_samples_leaf: float = 20
    smoothing: float = 10

    # frequency encoding
    frequency_tie_break: float = 1e-10
