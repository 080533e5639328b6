#!filepath: drugsens/config/data_config.py
from typing import List

from pydantic import BaseModel, Field


class PathsConfig(BaseModel):
    raw_data: str = "data/cleaned/GDSC_selected_columns.csv"
    output_dir: str = "output"


class DataConfig(BaseModel):
    target_column: str = "LN_IC50"
    train_ratio: float = 0.8
    seed: int = 42
    delimiter: str = ","
    # extra numeric pass-through features (not encoded)
    numeric_columns: List[str] = Field(default_factory=list)


class TierConfig(BaseModel):
    """
    Cardinality tiers are static configuration, never inferred from data.
    Column names are exact, case-sensitive matches.
    """

    low: List[str] = Field(default_factory=list)
    medium: List[str] = Field(default_factory=list)
    high: List[str] = Field(default_factory=list)

    def as_dict(self) -> dict[str, list[str]]:
        return {"low": list(self.low), "medium": list(self.medium), "high": list(self.high)}

    def all_columns(self) -> list[str]:
        return [*self.low, *self.medium, *self.high]
