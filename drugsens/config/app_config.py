#!filepath: drugsens/config/app_config.py
from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from drugsens.utils.errors import ConfigurationError
from .cleaning_config import CleaningConfig
from .data_config import DataConfig, PathsConfig, TierConfig
from .encoding_config import EncodingConfig
from .log_config import LogConfig
from .training_config import TrainingConfig

CONFIG_ENV_VAR = "DRUGSENS_CONFIG"


def default_config_path() -> Path:
    """
    返回包内默认配置：drugsens/config/base.yml
    """
    return Path(__file__).resolve().parent / "base.yml"


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    tiers: TierConfig = Field(default_factory=TierConfig)
    cleaning: CleaningConfig = Field(default_factory=CleaningConfig)
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 优先级：显式 path > $DRUGSENS_CONFIG > 包内 base.yml
        - 不依赖当前工作目录
        """
        # 1) .env（当前目录，可选）
        load_dotenv()

        # 2) 决定配置文件路径
        if path is None:
            path = os.getenv(CONFIG_ENV_VAR) or default_config_path()

        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        # 3) 读取 YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid config {path}:\n{e}") from e
