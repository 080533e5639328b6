#!filepath: tests/utils/test_filesystem.py
import pandas as pd

from drugsens.utils.filesystem import FileSystem


def test_ensure_dir(tmp_path):
    """测试 ensure_dir 是否能正确创建目录"""
    new_dir = tmp_path / "a" / "b"
    assert not new_dir.exists()

    FileSystem.ensure_dir(new_dir)
    assert new_dir.is_dir()


def test_safe_write(tmp_path):
    """原子写入，不残留 tmp 文件"""
    file_path = tmp_path / "nested" / "data.bin"

    FileSystem.safe_write(file_path, b"1234567890")

    assert file_path.read_bytes() == b"1234567890"
    assert not file_path.with_suffix(".bin.tmp").exists()


def test_json_roundtrip_keeps_unicode(tmp_path):
    path = tmp_path / "mapping.json"
    FileSystem.write_json(path, {"categories": ["Glioma", "Néuroblastoma"]})

    assert FileSystem.read_json(path) == {"categories": ["Glioma", "Néuroblastoma"]}
    assert "Néuroblastoma" in path.read_text(encoding="utf-8")


def test_parquet_keeps_string_categories_and_missing(tmp_path):
    df = pd.DataFrame({"COSMIC_ID": ["0683665", None], "LN_IC50": [1.0, float("nan")]})
    path = FileSystem.write_parquet(tmp_path / "x.parquet", df)

    back = FileSystem.read_parquet(path)
    assert back["COSMIC_ID"].iloc[0] == "0683665"
    assert pd.isna(back["COSMIC_ID"].iloc[1])
    assert not path.with_suffix(".parquet.tmp").exists()


def test_write_csv(tmp_path):
    path = FileSystem.write_csv(tmp_path / "t" / "summary.csv", pd.DataFrame({"a": [1, 2]}))
    assert path.read_text(encoding="utf-8").splitlines() == ["a", "1", "2"]


def test_remove(tmp_path):
    d = tmp_path / "models"
    FileSystem.ensure_dir(d)
    (d / "lm_onehot_only.joblib").write_bytes(b"x")

    FileSystem.remove(d)
    FileSystem.remove(d)
    assert not d.exists()
