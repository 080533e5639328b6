#!filepath: tests/engines/test_cleaning_engine.py
import pandas as pd
import pytest

from drugsens.engines.cleaning_engine import CleaningEngine
from drugsens.utils.errors import EmptyDataset, MissingColumnError


@pytest.fixture
def raw():
    return pd.DataFrame(
        {
            "COSMIC_ID": ["1", "1", "2", "2", "3", "3"],
            "Tissue": [None, None, "lung", None, "skin", "skin"],
            "TARGET": ["EGFR", None, "BRAF", "BRAF", None, "MEK"],
            "TCGA_DESC": ["LUAD", "LUAD", "SKCM", None, "SKCM", "SKCM"],
            "LN_IC50": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
        }
    )


@pytest.fixture
def engine():
    return CleaningEngine(
        group_column="COSMIC_ID",
        empty_shell_columns=["Tissue"],
        unknown_fill_columns=["TARGET"],
        drop_if_missing_columns=["TCGA_DESC"],
        not_available_fill_columns=["Tissue"],
    )


def test_clean_applies_rules_in_order(raw, engine):
    out, report = engine.clean(raw)

    # group "1" is an empty shell, row 3 has no TCGA_DESC
    assert out["COSMIC_ID"].tolist() == ["2", "3", "3"]
    assert out["TARGET"].tolist() == ["BRAF", "Unknown", "MEK"]
    assert out["Tissue"].tolist() == ["lung", "skin", "skin"]
    assert list(out.index) == [0, 1, 2]

    assert report.rows_in == 6
    assert report.rows_out == 3
    assert report.removed_groups == ["1"]
    assert report.rows_removed_as_empty_shell == 2
    assert report.rows_dropped_missing == 1
    assert report.filled["TARGET"] == 1
    assert report.missing_rate["Tissue"] == pytest.approx(3 / 6)


def test_partially_missing_group_is_kept_and_filled(raw, engine):
    out, report = engine.clean(raw.drop(index=[0, 1]))
    assert "2" in out["COSMIC_ID"].tolist()
    assert report.removed_groups == []


def test_input_is_not_mutated(raw, engine):
    before = raw.copy()
    engine.clean(raw)
    pd.testing.assert_frame_equal(raw, before)


def test_not_available_fill():
    df = pd.DataFrame({"Tissue": ["a", None], "TCGA_DESC": ["x", "y"]})
    out, report = CleaningEngine(not_available_fill_columns=["Tissue"]).clean(df)
    assert out["Tissue"].tolist() == ["a", "Not_Available"]
    assert report.filled == {"Tissue": 1}


def test_missing_configured_column(raw):
    with pytest.raises(MissingColumnError):
        CleaningEngine(unknown_fill_columns=["MSI"]).clean(raw)


def test_nothing_left(raw):
    with pytest.raises(EmptyDataset):
        CleaningEngine(drop_if_missing_columns=["TARGET"]).clean(raw.assign(TARGET=None))
