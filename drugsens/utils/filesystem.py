#!filepath: drugsens/utils/filesystem.py
import json
import shutil
from pathlib import Path
from typing import Any

import pandas as pd

from drugsens.utils.logger import logs


class FileSystem:
    """
    统一文件系统工具
    - 自动创建目录
    - 安全写入文件（临时文件 → rename）
    - JSON / parquet 读写
    - 删除文件/目录
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        """
        创建目录（如果不存在）
        """
        p = Path(path)
        if not p.exists():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] created dir: {p}")
        return p

    @staticmethod
    def file_exists(path: str | Path) -> bool:
        return Path(path).exists()

    @staticmethod
    def safe_write(path: str | Path, data: bytes) -> None:
        """
        原子写入（避免部分写入导致文件损坏）
            1) 先写入 tmp 文件
            2) rename → 正式文件
        """
        path = Path(path)
        FileSystem.ensure_dir(path.parent)

        tmp_path = path.with_suffix(path.suffix + ".tmp")

        with open(tmp_path, "wb") as f:
            f.write(data)

        tmp_path.replace(path)
        logs.debug(f"[FS] atomic write done: {path}")

    @staticmethod
    def write_json(path: str | Path, payload: Any) -> Path:
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        FileSystem.safe_write(path, text.encode("utf-8"))
        return Path(path)

    @staticmethod
    def read_json(path: str | Path) -> Any:
        return json.loads(Path(path).read_text(encoding="utf-8"))

    @staticmethod
    def write_parquet(path: str | Path, df: pd.DataFrame) -> Path:
        path = Path(path)
        FileSystem.ensure_dir(path.parent)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        df.to_parquet(tmp_path, index=False, engine="pyarrow")
        tmp_path.replace(path)
        return path

    @staticmethod
    def read_parquet(path: str | Path) -> pd.DataFrame:
        return pd.read_parquet(path, engine="pyarrow")

    @staticmethod
    def write_csv(path: str | Path, df: pd.DataFrame) -> Path:
        FileSystem.safe_write(path, df.to_csv(index=False).encode("utf-8"))
        return Path(path)

    @staticmethod
    def remove(path: str | Path) -> None:
        """
        安全删除文件/目录
        """
        p = Path(path)

        if not p.exists():
            return

        if p.is_dir():
            shutil.rmtree(p)
            logs.debug(f"[FS] removed dir: {p}")
        else:
            p.unlink()
            logs.debug(f"[FS] removed file: {p}")
