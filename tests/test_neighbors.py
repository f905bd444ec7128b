from __future__ import annotations

import numpy as np

from reliefrank.neighbors import build_class_indices, build_global_index


def test_global_index_orders_by_cityblock_distance() -> None:
    x = np.array([[0.0, 0.0], [1.0, 1.0], [0.2, 0.1], [5.0, 5.0]])
    index = build_global_index(x, categorical=False)
    assert index.query(x[0], 3).tolist() == [0, 2, 1]


def test_query_count_is_clipped_to_index_size() -> None:
    x = np.array([[0.0], [1.0], [3.0]])
    index = build_global_index(x, categorical=False)
    assert index.query(x[0], 10).tolist() == [0, 1, 2]
    assert index.query(x[0], 0).shape == (0,)


def test_class_indices_map_back_to_original_rows() -> None:
    x = np.array([[0.0, 0.0], [9.0, 9.0], [0.5, 0.0], [8.0, 9.0], [0.1, 0.1]])
    membership = np.array(
        [[True, False], [False, True], [True, False], [False, True], [True, False]]
    )
    indices = build_class_indices(x, membership, categorical=False)
    assert len(indices) == 2
    assert indices[0].size == 3
    assert indices[0].query(x[1], 1).tolist() == [2]
    assert indices[1].query(x[0], 2).tolist() == [3, 1]


def test_hamming_index_counts_mismatches() -> None:
    x = np.array([[1.0, 2.0, 3.0], [1.0, 2.0, 4.0], [9.0, 9.0, 3.0]])
    index = build_global_index(x, categorical=True)
    assert index.query(np.array([1.0, 2.0, 4.0]), 3).tolist() == [1, 0, 2]
