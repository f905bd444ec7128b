from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from sklearn.neighbors import NearestNeighbors

from reliefrank.distance import metric_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NeighborIndex:
    """Read-only K-nearest search over a subset of rows.

    ``rows`` maps positions inside the fitted searcher back to row indices
    of the matrix the index was built from.
    """

    searcher: NearestNeighbors
    rows: np.ndarray

    @property
    def size(self) -> int:
        return int(self.rows.shape[0])

    def query(self, point: np.ndarray, count: int) -> np.ndarray:
        count = min(int(count), self.size)
        if count <= 0:
            return np.zeros(0, dtype=int)
        point = np.asarray(point, dtype=float).reshape(1, -1)
        idx = self.searcher.kneighbors(point, n_neighbors=count, return_distance=False)
        return self.rows[idx[0]]


def build_index(
    x: np.ndarray,
    rows: np.ndarray,
    categorical: bool,
    n_jobs: int | None = None,
) -> NeighborIndex:
    rows = np.asarray(rows, dtype=int)
    searcher = NearestNeighbors(
        algorithm="brute",
        metric=metric_name(categorical),
        n_jobs=n_jobs,
    )
    searcher.fit(np.array(x[rows], dtype=float, copy=True))
    return NeighborIndex(searcher=searcher, rows=rows)


def build_global_index(
    x: np.ndarray, categorical: bool, n_jobs: int | None = None
) -> NeighborIndex:
    logger.debug("Building global neighbor index over %d rows", x.shape[0])
    return build_index(x, np.arange(x.shape[0], dtype=int), categorical, n_jobs=n_jobs)


def build_class_indices(
    x: np.ndarray,
    membership: np.ndarray,
    categorical: bool,
    n_jobs: int | None = None,
) -> list[NeighborIndex | None]:
    indices: list[NeighborIndex | None] = []
    for c in range(membership.shape[1]):
        rows = np.where(membership[:, c])[0]
        if rows.size == 0:
            indices.append(None)
            continue
        indices.append(build_index(x, rows, categorical, n_jobs=n_jobs))
    logger.debug(
        "Built %d per-class neighbor indices (sizes=%s)",
        len(indices),
        [0 if ix is None else ix.size for ix in indices],
    )
    return indices
