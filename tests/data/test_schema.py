#!filepath: tests/data/test_schema.py
import numpy as np
import pandas as pd
import pytest

from drugsens.data.schema import ColumnKind, DatasetSchema, load_dataset, to_categorical
from drugsens.utils.errors import EmptyDataset, InputError, MissingColumnError


@pytest.fixture
def schema():
    return DatasetSchema.build(categorical=["Tissue", "COSMIC_ID"], target="LN_IC50", numeric=["dose"])


def test_build_declares_kinds(schema):
    assert schema.names(ColumnKind.CATEGORICAL) == ["Tissue", "COSMIC_ID"]
    assert schema.names(ColumnKind.NUMERIC) == ["dose"]
    assert schema.columns["LN_IC50"] is ColumnKind.NULLABLE_NUMERIC


def test_to_categorical_normalises_missing_and_ids():
    s = pd.Series(["lung", "", "  ", None, np.nan, 683665.0, 7], dtype=object)
    assert to_categorical(s).tolist() == ["lung", None, None, None, None, "683665", "7"]


def test_load_dataset_applies_schema(tmp_path, schema):
    path = tmp_path / "raw.tsv"
    path.write_text(
        "Tissue\tCOSMIC_ID\tLN_IC50\tdose\textra\n"
        "lung\t0683665\t1.5\t10\tx\n"
        "\t683666\tNA\tbad\ty\n",
        encoding="utf-8",
    )

    df = load_dataset(path, schema=schema, delimiter="\t")

    assert list(df.columns) == ["Tissue", "COSMIC_ID", "dose", "LN_IC50"]
    assert df["Tissue"].tolist() == ["lung", None]
    # read as text: leading zeros survive
    assert df["COSMIC_ID"].tolist() == ["0683665", "683666"]
    assert df["LN_IC50"].iloc[0] == 1.5
    assert np.isnan(df["LN_IC50"].iloc[1])
    assert np.isnan(df["dose"].iloc[1])


def test_load_dataset_errors(tmp_path, schema):
    with pytest.raises(InputError):
        load_dataset(tmp_path / "missing.csv", schema=schema)

    header_only = tmp_path / "empty.csv"
    header_only.write_text("Tissue,COSMIC_ID,LN_IC50,dose\n", encoding="utf-8")
    with pytest.raises(EmptyDataset):
        load_dataset(header_only, schema=schema)

    partial = tmp_path / "partial.csv"
    partial.write_text("Tissue,LN_IC50\nlung,1.0\n", encoding="utf-8")
    with pytest.raises(MissingColumnError):
        load_dataset(partial, schema=schema)
