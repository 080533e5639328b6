"""
Categorical encoders (one-hot / frequency / target).

Each encoder is a pure fit / apply pair; mappings are explicit values.
"""
from .base import CategoricalEncoder
from .frequency import FrequencyEncoder
from .mapping import (
    FrequencyMapping,
    OneHotMapping,
    TargetMapping,
    mapping_from_dict,
)
from .onehot import OneHotEncoder
from .target import TargetEncoder

__all__ = [
    "CategoricalEncoder",
    "OneHotEncoder",
    "FrequencyEncoder",
    "TargetEncoder",
    "OneHotMapping",
    "FrequencyMapping",
    "TargetMapping",
    "mapping_from_dict",
]
