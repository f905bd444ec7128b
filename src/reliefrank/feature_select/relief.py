from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass

import numpy as np

from reliefrank.config import EPS_DEGENERATE
from reliefrank.distance import attribute_distance, rank_decay_weights
from reliefrank.errors import DegenerateWeightsWarning
from reliefrank.neighbors import NeighborIndex, build_class_indices, build_global_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionStats:
    ndc: float
    nda: np.ndarray
    ndadc: np.ndarray
    n_updates: int

    @property
    def degenerate(self) -> bool:
        return abs(self.ndc) <= EPS_DEGENERATE or abs(self.n_updates - self.ndc) <= EPS_DEGENERATE

    def weights(self) -> np.ndarray:
        if self.degenerate:
            return np.full(self.nda.shape[0], np.nan, dtype=float)
        return self.ndadc / self.ndc - (self.nda - self.ndadc) / (self.n_updates - self.ndc)


def _draw_observations(rng: np.random.Generator, n_obs: int, n_updates: int) -> np.ndarray:
    return rng.choice(n_obs, size=n_updates, replace=False)


def _weighted_diff(
    x: np.ndarray,
    obs: int,
    neighbors: np.ndarray,
    categorical: bool,
    sigma: float,
) -> np.ndarray:
    # Rank-decayed mean per-attribute distance from ``obs`` to ``neighbors``.
    dist = attribute_distance(categorical)(x[obs], x[neighbors])
    return rank_decay_weights(neighbors.shape[0], sigma) @ dist


def relieff_classification(
    x: np.ndarray,
    membership: np.ndarray,
    class_prob: np.ndarray,
    n_updates: int,
    n_neighbors: int,
    categorical: bool,
    sigma: float,
    rng: np.random.Generator,
    n_jobs: int | None = None,
) -> np.ndarray:
    """ReliefF weights for a categorical outcome.

    ``x`` holds accepted, already scaled attributes; ``membership`` is the
    (N, G) one-hot class matrix and ``class_prob`` the renormalized prior.
    Weights are bounded in [-1, 1].
    """
    n_obs, n_attr = x.shape
    weights = np.zeros(n_attr, dtype=float)
    class_of = np.argmax(membership, axis=1)
    class_size = membership.sum(axis=0)

    searchers = build_class_indices(x, membership, categorical, n_jobs=n_jobs)
    draws = _draw_observations(rng, n_obs, n_updates)

    for obs in draws.tolist():
        this_class = int(class_of[obs])
        point = x[obs]

        # Hits: the first returned row is normally ``obs`` itself. Any row of
        # the same class at distance zero contributes identically.
        d_hit = np.zeros(n_attr, dtype=float)
        len_hits = min(int(class_size[this_class]) - 1, n_neighbors)
        if len_hits > 0:
            hits = searchers[this_class].query(point, len_hits + 1)[1:]
            d_hit = _weighted_diff(x, obs, hits, categorical, sigma)

        d_miss = np.zeros(n_attr, dtype=float)
        miss_prob = 0.0
        for c, searcher in enumerate(searchers):
            if c == this_class or searcher is None:
                continue
            len_miss = min(searcher.size, n_neighbors)
            misses = searcher.query(point, len_miss)
            d_miss += _weighted_diff(x, obs, misses, categorical, sigma) * class_prob[c]
            miss_prob += float(class_prob[c])
        if miss_prob > 0:
            # Equivalent to P(C) / (1 - P(class(obs))).
            d_miss /= miss_prob

        weights += (d_miss - d_hit) / n_updates

    return weights


def _neighbors_without_self(index: NeighborIndex, point: np.ndarray, obs: int, count: int) -> np.ndarray:
    nearest = index.query(point, count + 1)
    is_self = nearest == obs
    if np.any(is_self):
        return nearest[~is_self]
    return nearest[:-1]


def regression_stats(
    x: np.ndarray,
    y: np.ndarray,
    n_updates: int,
    n_neighbors: int,
    categorical: bool,
    sigma: float,
    rng: np.random.Generator,
    n_jobs: int | None = None,
) -> RegressionStats:
    n_obs, n_attr = x.shape
    ndc = 0.0
    nda = np.zeros(n_attr, dtype=float)
    ndadc = np.zeros(n_attr, dtype=float)

    draws = _draw_observations(rng, n_obs, n_updates)

    y = np.asarray(y, dtype=float)
    y_range = float(np.max(y) - np.min(y))
    if y_range > 0:
        y = (y - np.mean(y)) / y_range
    else:
        y = np.zeros_like(y)

    len_nei = min(n_obs - 1, n_neighbors)
    dist_wts = rank_decay_weights(len_nei, sigma)
    dist1d = attribute_distance(categorical)
    searcher = build_global_index(x, categorical, n_jobs=n_jobs)

    for obs in draws.tolist():
        nearest = _neighbors_without_self(searcher, x[obs], obs, len_nei)
        y_diff = np.abs(y[obs] - y[nearest])
        ndc += float(np.sum(y_diff * dist_wts))

        vdiff = dist1d(x[obs], x[nearest])
        nda += dist_wts @ vdiff
        ndadc += (dist_wts * y_diff) @ vdiff

    return RegressionStats(ndc=ndc, nda=nda, ndadc=ndadc, n_updates=n_updates)


def relieff_regression(
    x: np.ndarray,
    y: np.ndarray,
    n_updates: int,
    n_neighbors: int,
    categorical: bool,
    sigma: float,
    rng: np.random.Generator,
    n_jobs: int | None = None,
) -> tuple[np.ndarray, bool]:
    """RReliefF weights for a continuous outcome.

    Returns ``(weights, degenerate)``. When the outcome never differs between
    neighbors (or always differs maximally) the estimate is undefined: the
    weights come back as NaN and a ``DegenerateWeightsWarning`` is emitted.
    """
    stats = regression_stats(
        x,
        y,
        n_updates=n_updates,
        n_neighbors=n_neighbors,
        categorical=categorical,
        sigma=sigma,
        rng=rng,
        n_jobs=n_jobs,
    )
    if stats.degenerate:
        warnings.warn(
            f"RReliefF weights are undefined (NdC={stats.ndc:.3g}, updates={stats.n_updates})",
            DegenerateWeightsWarning,
            stacklevel=2,
        )
        logger.debug("Degenerate regression statistics: NdC=%s", stats.ndc)
    return stats.weights(), stats.degenerate
