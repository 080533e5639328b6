#!filepath: tests/observability/test_metrics.py

from drugsens.observability.metrics import MetricRecorder


def test_metric_record():
    m = MetricRecorder(enabled=True)
    m.record("preprocess/rows_out", 123)

    assert m.metrics["preprocess/rows_out"] == 123


def test_metric_disabled():
    m = MetricRecorder(enabled=False)
    m.record("x", 1)
    m.increment("y")

    assert m.metrics == {}


def test_increment_accumulates_fallback_rows():
    m = MetricRecorder()
    m.increment("fallback/onehot_freq/medium/Site", 3)
    m.increment("fallback/onehot_freq/medium/Site")
    m.increment("fallback/onehot_freq/high/COSMIC_ID", 0)

    assert m.metrics["fallback/onehot_freq/medium/Site"] == 4
    assert m.metrics["fallback/onehot_freq/high/COSMIC_ID"] == 0
