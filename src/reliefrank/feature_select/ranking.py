from __future__ import annotations

import numpy as np


def _rank_desc_with_index_tiebreak(scores: np.ndarray, idx: np.ndarray) -> np.ndarray:
    # Desc score, asc index; NaN scores sort last.
    return np.lexsort((idx, -scores))


def identity_ranking(n_attributes: int) -> tuple[np.ndarray, np.ndarray]:
    return np.arange(n_attributes, dtype=int), np.full(n_attributes, np.nan, dtype=float)


def rank_attributes(
    accepted_weights: np.ndarray,
    accepted: np.ndarray,
    rejected: np.ndarray,
    n_attributes: int,
) -> tuple[np.ndarray, np.ndarray]:
    accepted = np.asarray(accepted, dtype=int)
    rejected = np.asarray(rejected, dtype=int)
    accepted_weights = np.asarray(accepted_weights, dtype=float)
    if accepted.size == 0:
        return identity_ranking(n_attributes)

    weights = np.full(n_attributes, np.nan, dtype=float)
    weights[accepted] = accepted_weights

    order = _rank_desc_with_index_tiebreak(accepted_weights, accepted)
    ranking = np.concatenate([accepted[order], np.sort(rejected)])
    return ranking.astype(int), weights
