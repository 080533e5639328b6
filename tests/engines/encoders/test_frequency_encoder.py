#!filepath: tests/engines/encoders/test_frequency_encoder.py
import math

import pandas as pd
import pytest

from drugsens.engines.encoders.frequency import FrequencyEncoder
from drugsens.utils.errors import ConfigurationError


def test_frequency_of_more_common_category_is_higher(small_frame):
    out, mapping = FrequencyEncoder().fit(small_frame, ["C"])
    lookup = mapping.tables["C"].lookup()

    assert lookup["B"] > lookup["A"]
    assert list(out.columns) == ["y", "C_FreqEnc"]
    assert out.loc[0, "C_FreqEnc"] == pytest.approx(0.2 + 1e-10, abs=1e-15)
    assert out.loc[2, "C_FreqEnc"] == pytest.approx(0.3 + 2e-10, abs=1e-15)


def test_raw_frequencies_sum_to_one_and_adjusted_never_tie():
    df = pd.DataFrame({"g": ["a", "b", "c", "d", "a", "b", "c", "d", None]})
    _, mapping = FrequencyEncoder().fit(df, ["g"])
    table = mapping.tables["g"]

    assert math.isclose(sum(table.frequency), 1.0, rel_tol=1e-12)
    assert len(set(table.adjusted)) == len(table.adjusted)
    # equal raw frequency → order follows the sorted label
    assert list(table.adjusted) == sorted(table.adjusted)


def test_unseen_and_missing_fall_back_to_min_adjusted():
    enc = FrequencyEncoder()
    _, mapping = enc.fit(pd.DataFrame({"g": ["a", "a", "a", "b"]}), ["g"])
    table = mapping.tables["g"]

    out = enc.apply(pd.DataFrame({"g": ["b", "zzz", None]}), ["g"], mapping)

    assert table.min_adjusted == table.lookup()["b"]
    assert out["g_FreqEnc"].tolist() == [table.min_adjusted] * 3


def test_missing_training_values_get_fallback_on_train_side_too():
    enc = FrequencyEncoder()
    out, mapping = enc.fit(pd.DataFrame({"g": ["a", "a", "b", None]}), ["g"])
    assert out["g_FreqEnc"].iloc[3] == mapping.tables["g"].min_adjusted
    assert not out["g_FreqEnc"].isna().any()


def test_tie_break_must_be_positive():
    with pytest.raises(ConfigurationError):
        FrequencyEncoder(tie_break=0)
