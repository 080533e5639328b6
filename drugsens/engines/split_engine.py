# drugsens/engines/split_engine.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Tuple

import numpy as np

from drugsens.utils.errors import EmptyDataset, InputError, InvalidRatio


@dataclass(frozen=True)
class SplitRecord:
    """
    SplitRecord（FROZEN）

    Everything needed to rebuild a split without touching the generator:
    the index lists themselves are persisted, the seed is provenance.
    """

    seed: int
    ratio: float
    train_indices: Tuple[int, ...]
    test_indices: Tuple[int, ...]
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def n_train(self) -> int:
        return len(self.train_indices)

    @property
    def n_test(self) -> int:
        return len(self.test_indices)

    @property
    def n_total(self) -> int:
        return self.n_train + self.n_test

    def matches(self, *, n: int, ratio: float, seed: int) -> bool:
        return self.n_total == n and self.ratio == ratio and self.seed == seed

    def validate(self) -> "SplitRecord":
        """
        Disjoint, and covering 0..n-1 exactly once.
        """
        train, test = set(self.train_indices), set(self.test_indices)
        if len(train) != self.n_train or len(test) != self.n_test:
            raise InputError("[SplitRecord] duplicated indices in split record")
        if train & test:
            raise InputError("[SplitRecord] train / test indices overlap")
        if train | test != set(range(self.n_total)):
            raise InputError("[SplitRecord] indices do not cover 0..n-1")
        return self

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "ratio": self.ratio,
            "train_indices": list(self.train_indices),
            "test_indices": list(self.test_indices),
            "n_total": self.n_total,
            "n_train": self.n_train,
            "n_test": self.n_test,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "SplitRecord":
        try:
            record = cls(
                seed=int(payload["seed"]),
                ratio=float(payload["ratio"]),
                train_indices=tuple(int(i) for i in payload["train_indices"]),
                test_indices=tuple(int(i) for i in payload["test_indices"]),
                timestamp=str(payload.get("timestamp", "")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InputError(f"[SplitRecord] malformed split record: {e}") from e

        if "n_train" in payload and int(payload["n_train"]) != record.n_train:
            raise InputError("[SplitRecord] n_train does not match train_indices")
        if "n_test" in payload and int(payload["n_test"]) != record.n_test:
            raise InputError("[SplitRecord] n_test does not match test_indices")

        return record.validate()


class SplitEngine:
    """
    SplitEngine

    split(n, ratio, seed):
      - seeded generator → uniform random permutation of 0..n-1
      - first floor(n * ratio) → train, rest → test
      - same (n, seed) → identical partition, always
    """

    def split(self, n: int, ratio: float, seed: int) -> Tuple[np.ndarray, np.ndarray, int]:
        if not (0.0 < ratio < 1.0):
            raise InvalidRatio(f"split ratio must be in (0, 1), got {ratio}")
        if n <= 0:
            raise EmptyDataset("cannot split an empty dataset")

        rng = np.random.default_rng(seed)
        shuffled = rng.permutation(n)
        n_train = math.floor(n * ratio)

        return shuffled[:n_train], shuffled[n_train:], seed

    def make_record(self, n: int, ratio: float, seed: int) -> SplitRecord:
        train_idx, test_idx, seed_used = self.split(n, ratio, seed)
        return SplitRecord(
            seed=seed_used,
            ratio=ratio,
            train_indices=tuple(int(i) for i in train_idx),
            test_indices=tuple(int(i) for i in test_idx),
        )
