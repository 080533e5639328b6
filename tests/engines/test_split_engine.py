#!filepath: tests/engines/test_split_engine.py
import json

import numpy as np
import pytest

from drugsens.engines.split_engine import SplitEngine, SplitRecord
from drugsens.utils.errors import EmptyDataset, InputError, InvalidRatio


@pytest.mark.parametrize("n", [1, 2, 10, 97, 1000])
def test_partition_covers_all_rows_exactly_once(n):
    train, test, seed = SplitEngine().split(n, 0.8, 42)

    assert seed == 42
    assert len(train) + len(test) == n
    assert len(train) == int(np.floor(n * 0.8))
    assert set(train).isdisjoint(test)
    assert set(train) | set(test) == set(range(n))


def test_same_seed_same_partition():
    engine = SplitEngine()
    a_train, a_test, _ = engine.split(10, 0.8, 123)
    b_train, b_test, _ = engine.split(10, 0.8, 123)

    assert len(a_train) == 8 and len(a_test) == 2
    assert a_train.tolist() == b_train.tolist()
    assert a_test.tolist() == b_test.tolist()


def test_different_seed_changes_partition():
    engine = SplitEngine()
    a, _, _ = engine.split(200, 0.8, 1)
    b, _, _ = engine.split(200, 0.8, 2)
    assert a.tolist() != b.tolist()


@pytest.mark.parametrize("ratio", [0.0, 1.0, -0.1, 1.5])
def test_ratio_outside_open_interval(ratio):
    with pytest.raises(InvalidRatio):
        SplitEngine().split(10, ratio, 42)


def test_empty_dataset():
    with pytest.raises(EmptyDataset):
        SplitEngine().split(0, 0.8, 42)


def test_record_reconstructs_split_without_generator():
    record = SplitEngine().make_record(25, 0.8, 42)
    payload = json.loads(json.dumps(record.to_dict()))

    assert payload["n_total"] == 25
    assert payload["n_train"] == 20
    assert payload["n_test"] == 5

    restored = SplitRecord.from_dict(payload)
    assert restored.train_indices == record.train_indices
    assert restored.test_indices == record.test_indices
    assert restored.matches(n=25, ratio=0.8, seed=42)
    assert not restored.matches(n=26, ratio=0.8, seed=42)
    assert not restored.matches(n=25, ratio=0.8, seed=7)


def test_corrupt_record_is_input_error():
    payload = SplitEngine().make_record(10, 0.8, 42).to_dict()

    overlapping = dict(payload, test_indices=payload["train_indices"][:2])
    with pytest.raises(InputError):
        SplitRecord.from_dict(overlapping)

    wrong_count = dict(payload, n_train=3)
    with pytest.raises(InputError):
        SplitRecord.from_dict(wrong_count)

    with pytest.raises(InputError):
        SplitRecord.from_dict({"seed": 1})
