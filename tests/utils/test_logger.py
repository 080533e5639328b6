#!filepath: tests/utils/test_logger.py
import pytest
from loguru import logger

from drugsens.utils.errors import InputError, MissingArtifactError
from drugsens.utils.logger import Logging


def test_configure_writes_file_sink(tmp_path):
    logs = Logging()
    log_dir = tmp_path / "logs"

    logs.configure(log_dir=str(log_dir), level="DEBUG")
    logs.info("[Test] hello")
    logs.configure(log_dir=str(log_dir), level="DEBUG")
    logger.remove(logs._sink_id)

    files = list(log_dir.glob("*.log"))
    assert len(files) == 1
    assert "[Test] hello" in files[0].read_text(encoding="utf-8")


def test_catch_logs_and_reraises():
    logs = Logging()
    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))

    @logs.catch(msg="encode failed")
    def boom():
        raise ValueError("bad")

    with pytest.raises(ValueError):
        boom()
    logger.remove(sink_id)

    assert any("encode failed" in line for line in captured)


def test_missing_artifact_message_names_step(tmp_path):
    err = MissingArtifactError(tmp_path / "split_indices.json", "split")

    assert isinstance(err, InputError)
    assert "split_indices.json" in str(err)
    assert "Please run the 'split' step first" in str(err)
