from __future__ import annotations

import logging
from typing import Any

import numpy as np

from reliefrank.config import DEFAULT_NEIGHBORS, SAMPLE_ALL, Mode
from reliefrank.feature_select.ranking import identity_ranking, rank_attributes
from reliefrank.feature_select.relief import relieff_classification, relieff_regression
from reliefrank.preprocess import prepare
from reliefrank.types import PreparedData, ReliefOptions, ReliefResult

logger = logging.getLogger(__name__)


def make_rng(random_state: Any = None) -> np.random.Generator:
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def _run_engine(data: PreparedData, rng: np.random.Generator) -> tuple[np.ndarray, bool]:
    if data.mode == Mode.CLASSIFICATION:
        weights = relieff_classification(
            data.x,
            data.membership,
            data.class_prob,
            n_updates=data.n_updates,
            n_neighbors=data.n_neighbors,
            categorical=data.categorical,
            sigma=data.sigma,
            rng=rng,
            n_jobs=data.n_jobs,
        )
        return weights, False
    return relieff_regression(
        data.x,
        data.y,
        n_updates=data.n_updates,
        n_neighbors=data.n_neighbors,
        categorical=data.categorical,
        sigma=data.sigma,
        rng=rng,
        n_jobs=data.n_jobs,
    )


def relieff(
    x: Any,
    y: Any,
    *,
    neighbors: Any = DEFAULT_NEIGHBORS,
    mode: str | None = None,
    prior: Any = None,
    sample_count: Any = SAMPLE_ALL,
    categorical_attributes: Any = False,
    kernel_width: Any = None,
    random_state: Any = None,
    n_jobs: int | None = None,
) -> ReliefResult:
    """Rank the columns of ``x`` by ReliefF (classification) or RReliefF
    (regression) importance for outcome ``y``.

    ``ranking`` lists 0-based column indices, most important first; constant
    columns trail in their original order with NaN weights. ``random_state``
    may be a seed or a ``numpy.random.Generator``; a fixed seed reproduces the
    result exactly.
    """
    options = ReliefOptions(
        neighbors=neighbors,
        mode=mode,
        prior=prior,
        sample_count=sample_count,
        categorical_attributes=categorical_attributes,
        kernel_width=kernel_width,
        n_jobs=n_jobs,
    )
    data = prepare(x, y, options)
    logger.debug(
        "ReliefF %s: %d observations, %d/%d accepted attributes, K=%d, updates=%d",
        data.mode,
        data.n_observations,
        data.accepted.size,
        data.n_attributes,
        data.n_neighbors,
        data.n_updates,
    )

    if data.all_rejected:
        ranking, weights = identity_ranking(data.n_attributes)
        degenerate = False
    else:
        accepted_weights, degenerate = _run_engine(data, make_rng(random_state))
        ranking, weights = rank_attributes(
            accepted_weights, data.accepted, data.rejected, data.n_attributes
        )

    return ReliefResult(
        ranking=ranking,
        weights=weights,
        mode=data.mode,
        accepted=data.accepted,
        rejected=data.rejected,
        n_observations=data.n_observations,
        n_updates=data.n_updates,
        degenerate=degenerate,
        feature_names=data.feature_names,
    )


def rank_features(x: Any, y: Any, **options: Any) -> tuple[np.ndarray, np.ndarray]:
    result = relieff(x, y, **options)
    return result.ranking, result.weights
