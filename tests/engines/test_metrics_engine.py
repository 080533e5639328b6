#!filepath: tests/engines/test_metrics_engine.py
import math

import numpy as np
import pytest

from drugsens.engines import metrics_engine as m


def test_known_values():
    actual = [1.0, 2.0, 3.0]
    pred = [1.0, 2.0, 5.0]

    assert m.rmse(actual, pred) == pytest.approx(math.sqrt(4 / 3))
    assert m.mae(actual, pred) == pytest.approx(2 / 3)
    assert m.r2(actual, pred) == pytest.approx(-1.0)
    assert m.pearson_r(actual, pred) == pytest.approx(np.corrcoef(actual, pred)[0, 1])


def test_perfect_prediction():
    y = np.linspace(-2, 3, 20)
    out = m.evaluate(y, y)

    assert out["RMSE"] == pytest.approx(0.0)
    assert out["MAE"] == pytest.approx(0.0)
    assert out["R2"] == pytest.approx(1.0)
    assert out["r"] == pytest.approx(1.0)


def test_nan_pairs_are_dropped():
    actual = [1.0, np.nan, 3.0, 4.0]
    pred = [1.0, 2.0, np.nan, 5.0]
    assert m.mae(actual, pred) == pytest.approx(0.5)
    assert m.rmse(actual, pred) == pytest.approx(math.sqrt(0.5))


def test_degenerate_inputs_give_nan():
    assert math.isnan(m.r2([2.0, 2.0, 2.0], [1.0, 2.0, 3.0]))
    assert math.isnan(m.pearson_r([1.0, 2.0, 3.0], [4.0, 4.0, 4.0]))
    assert math.isnan(m.pearson_r([1.0], [1.0]))
    assert math.isnan(m.rmse([], []))


def test_length_mismatch():
    with pytest.raises(ValueError):
        m.rmse([1.0, 2.0], [1.0])


def test_matches_sklearn_on_noisy_predictions():
    from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

    rng = np.random.default_rng(0)
    actual = rng.normal(size=50)
    pred = actual + rng.normal(scale=0.3, size=50)

    out = m.evaluate(actual, pred)
    assert out["RMSE"] == pytest.approx(math.sqrt(mean_squared_error(actual, pred)))
    assert out["MAE"] == pytest.approx(mean_absolute_error(actual, pred))
    assert out["R2"] == pytest.approx(r2_score(actual, pred))


def test_single_pair_r2_is_nan():
    assert math.isnan(m.r2([1.0, np.nan], [1.5, 2.0]))
    assert m.mae([1.0, np.nan], [1.5, 2.0]) == pytest.approx(0.5)
