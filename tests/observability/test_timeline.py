#!filepath: tests/observability/test_timeline.py

import pytest
from loguru import logger

from drugsens.observability.timeline_reporter import TimelineReporter, stage_totals


@pytest.fixture
def timeline():
    return {
        "encode/onehot_only": 1.23,
        "encode/onehot_freq": 0.77,
        "train/onehot_only": 2.34,
    }


def test_stage_totals_group_leaves(timeline):
    totals = stage_totals(timeline)

    assert list(totals) == ["encode", "train"]
    assert totals["encode"] == pytest.approx(2.0)
    assert totals["train"] == pytest.approx(2.34)


def test_timeline_log_output(timeline):
    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))
    TimelineReporter(timeline, "20260101_120000").print()
    logger.remove(sink_id)

    output = "\n".join(captured)

    assert "run 20260101_120000: 2 stages" in output
    assert "encode/onehot_freq" in output
    assert "2.000s" in output
    assert "4.340s" in output
