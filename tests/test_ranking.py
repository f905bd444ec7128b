from __future__ import annotations

import numpy as np

from reliefrank.feature_select.ranking import identity_ranking, rank_attributes


def test_rank_attributes_desc_with_index_tiebreak_and_rejected_tail() -> None:
    ranking, weights = rank_attributes(
        accepted_weights=np.array([0.1, 0.3, 0.1]),
        accepted=np.array([0, 2, 4]),
        rejected=np.array([1, 3]),
        n_attributes=5,
    )
    assert ranking.tolist() == [2, 0, 4, 1, 3]
    assert np.isnan(weights[[1, 3]]).all()
    assert np.allclose(weights[[0, 2, 4]], [0.1, 0.3, 0.1])


def test_rank_attributes_nan_weights_sort_last_among_accepted() -> None:
    ranking, _ = rank_attributes(
        accepted_weights=np.array([np.nan, -0.2, 0.4]),
        accepted=np.array([0, 1, 2]),
        rejected=np.array([], dtype=int),
        n_attributes=3,
    )
    assert ranking.tolist() == [2, 1, 0]


def test_identity_ranking() -> None:
    ranking, weights = identity_ranking(4)
    assert ranking.tolist() == [0, 1, 2, 3]
    assert np.isnan(weights).all()
