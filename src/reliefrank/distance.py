from __future__ import annotations

from typing import Callable

import numpy as np

from reliefrank.config import DistanceName

AttributeDistance = Callable[[np.ndarray, np.ndarray], np.ndarray]


def cityblock(value: np.ndarray, others: np.ndarray) -> np.ndarray:
    return np.abs(value - others)


def hamming(value: np.ndarray, others: np.ndarray) -> np.ndarray:
    return (value != others).astype(float)


def attribute_distance(categorical: bool) -> AttributeDistance:
    """Per-attribute difference used for weight updates.

    ``value`` is one observation (a row, or a single attribute value) and
    ``others`` its neighbors stacked along the first axis.
    """
    return hamming if categorical else cityblock


def metric_name(categorical: bool) -> str:
    return DistanceName.HAMMING if categorical else DistanceName.CITYBLOCK


def rank_decay_weights(length: int, sigma: float) -> np.ndarray:
    if length <= 0:
        return np.zeros(0, dtype=float)
    ranks = np.arange(1, length + 1, dtype=float)
    # sigma=inf gives ranks/sigma == 0, i.e. equal weights.
    w = np.exp(-((ranks / float(sigma)) ** 2))
    return w / np.sum(w)
