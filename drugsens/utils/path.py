#!filepath: drugsens/utils/path.py
from pathlib import Path


class PathManager:
    """
    输出目录结构（root = paths.output_dir）：

    <root>
     ├── data/
     │     ├── cleaned.parquet
     │     ├── split_indices.json
     │     ├── train_raw.parquet / test_raw.parquet
     │     ├── train_<strategy>.parquet / test_<strategy>.parquet
     │     └── mapping_<strategy>.json
     ├── tables/
     │     ├── cleaning_report.json
     │     ├── encoding_summary.csv
     │     ├── model_results.csv
     │     └── model_ranking.csv / best_by_strategy.csv / best_by_model.csv
     └── models/
           └── <model>_<strategy>.joblib

    No global root: every pipeline run builds its own PathManager
    from config and passes it down.
    """

    def __init__(self, root: str | Path):
        self._root = Path(root).resolve()

    def root(self) -> Path:
        return self._root

    # ---------------------------------------------------------
    # Top-level dirs
    # ---------------------------------------------------------
    def data_dir(self) -> Path:
        return self._root / "data"

    def tables_dir(self) -> Path:
        return self._root / "tables"

    def models_dir(self) -> Path:
        return self._root / "models"

    # ---------------------------------------------------------
    # data/
    # ---------------------------------------------------------
    def cleaned_file(self) -> Path:
        return self.data_dir() / "cleaned.parquet"

    def split_file(self) -> Path:
        return self.data_dir() / "split_indices.json"

    def train_raw_file(self) -> Path:
        return self.data_dir() / "train_raw.parquet"

    def test_raw_file(self) -> Path:
        return self.data_dir() / "test_raw.parquet"

    def train_encoded_file(self, strategy: str) -> Path:
        return self.data_dir() / f"train_{strategy}.parquet"

    def test_encoded_file(self, strategy: str) -> Path:
        return self.data_dir() / f"test_{strategy}.parquet"

    def mapping_file(self, strategy: str) -> Path:
        return self.data_dir() / f"mapping_{strategy}.json"

    # ---------------------------------------------------------
    # tables/ + models/
    # ---------------------------------------------------------
    def cleaning_report_file(self) -> Path:
        return self.tables_dir() / "cleaning_report.json"

    def encoding_summary_file(self) -> Path:
        return self.tables_dir() / "encoding_summary.csv"

    def results_file(self) -> Path:
        return self.tables_dir() / "model_results.csv"

    def ranking_file(self) -> Path:
        return self.tables_dir() / "model_ranking.csv"

    def best_by_strategy_file(self) -> Path:
        return self.tables_dir() / "best_by_strategy.csv"

    def best_by_model_file(self) -> Path:
        return self.tables_dir() / "best_by_model.csv"

    def model_file(self, model_name: str, strategy: str) -> Path:
        return self.models_dir() / f"{model_name}_{strategy}.joblib"
