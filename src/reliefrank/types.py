from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import numpy as np
import pandas as pd

from reliefrank.config import DEFAULT_NEIGHBORS, SAMPLE_ALL


@dataclass(frozen=True)
class NumericOutcome:
    values: np.ndarray

    def __len__(self) -> int:
        return int(self.values.shape[0])

    def missing_mask(self) -> np.ndarray:
        return np.isnan(self.values)

    def take(self, rows: np.ndarray) -> NumericOutcome:
        return NumericOutcome(values=self.values[rows])


@dataclass(frozen=True)
class CategoricalOutcome:
    # Raw labels as an object array; pandas.Categorical keeps its category order.
    labels: np.ndarray
    categories: list[Any] | None = None

    def __len__(self) -> int:
        return int(self.labels.shape[0])

    def missing_mask(self) -> np.ndarray:
        missing = pd.isna(self.labels)
        empty = np.array([isinstance(v, str) and v == "" for v in self.labels], dtype=bool)
        return np.asarray(missing, dtype=bool) | empty

    def take(self, rows: np.ndarray) -> CategoricalOutcome:
        return CategoricalOutcome(labels=self.labels[rows], categories=self.categories)


Outcome = Union[NumericOutcome, CategoricalOutcome]


@dataclass(frozen=True)
class ReliefOptions:
    neighbors: Any = DEFAULT_NEIGHBORS
    mode: str | None = None
    prior: Any = None
    sample_count: Any = SAMPLE_ALL
    categorical_attributes: Any = False
    kernel_width: Any = None
    n_jobs: int | None = None


@dataclass(frozen=True)
class PreparedData:
    """Validated, filtered and scaled inputs for one ReliefF run.

    ``x`` holds only accepted attributes. ``row_index`` maps rows of ``x``
    back to the caller's rows; ``accepted``/``rejected`` map columns back.
    """

    x: np.ndarray
    y: np.ndarray
    mode: str
    membership: np.ndarray | None
    class_prob: np.ndarray | None
    levels: list[Any]
    accepted: np.ndarray
    rejected: np.ndarray
    row_index: np.ndarray
    n_attributes: int
    n_neighbors: int
    n_updates: int
    categorical: bool
    sigma: float
    n_jobs: int | None = None
    feature_names: list[str] | None = None

    @property
    def n_observations(self) -> int:
        return int(self.x.shape[0])

    @property
    def all_rejected(self) -> bool:
        return self.accepted.size == 0


@dataclass(frozen=True)
class ReliefResult:
    ranking: np.ndarray
    weights: np.ndarray
    mode: str
    accepted: np.ndarray
    rejected: np.ndarray
    n_observations: int
    n_updates: int
    degenerate: bool = False
    feature_names: list[str] | None = None

    def __iter__(self):
        # Allows ``ranking, weights = relieff(...)``.
        yield self.ranking
        yield self.weights

    def to_frame(self) -> pd.DataFrame:
        p = self.weights.shape[0]
        names = self.feature_names if self.feature_names is not None else [f"x{i}" for i in range(p)]
        rank_of = np.empty(p, dtype=int)
        rank_of[self.ranking] = np.arange(1, p + 1, dtype=int)
        rejected = np.zeros(p, dtype=bool)
        rejected[self.rejected] = True
        frame = pd.DataFrame(
            {
                "feature_index": np.arange(p, dtype=int),
                "feature": names,
                "weight": self.weights,
                "rank": rank_of,
                "rejected": rejected,
            }
        )
        return frame.sort_values("rank", kind="mergesort").reset_index(drop=True)
