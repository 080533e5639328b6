#!filepath: drugsens/config/cleaning_config.py
from typing import List

from pydantic import BaseModel, Field


class CleaningConfig(BaseModel):
    enabled: bool = True

    # groups (cell lines) whose rows are ALL missing on these columns are removed
    group_column: str = "COSMIC_ID"
    empty_shell_columns: List[str] = Field(default_factory=list)

    unknown_fill_columns: List[str] = Field(default_factory=list)
    unknown_label: str = "Unknown"

    drop_if_missing_columns: List[str] = Field(default_factory=list)

    not_available_fill_columns: List[str] = Field(default_factory=list)
    not_available_label: str = "Not_Available"
