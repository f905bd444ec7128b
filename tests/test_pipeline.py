from __future__ import annotations

import numpy as np
import pandas as pd

from reliefrank import rank_features, relieff


def test_rank_features_runs_for_every_mode() -> None:
    ranking, weights = rank_features(
        [[0, 0], [0, 1], [1, 0], [1, 1]],
        ["A", "A", "B", "B"],
        neighbors=1,
        categorical_attributes=True,
    )
    assert ranking.tolist() == [0, 1]
    assert np.isclose(weights[0], 1.0)

    rng = np.random.default_rng(2)
    x = rng.normal(size=(12, 2))
    ranking, weights = rank_features(x, x[:, 0] * 2.0, random_state=0)
    assert sorted(ranking.tolist()) == [0, 1]
    assert np.isfinite(weights).all()

    ranking, weights = rank_features(np.ones((4, 2)), ["a", "b", "a", "b"])
    assert ranking.tolist() == [0, 1]
    assert np.isnan(weights).all()


def test_dataframe_column_names_reach_the_result() -> None:
    frame = pd.DataFrame(
        {
            "pressure": [0.0, 0.2, 0.1, 0.9, 1.0, 0.8],
            "humidity": [0.3, 0.5, 0.4, 0.6, 0.2, 0.1],
        }
    )
    result = relieff(frame, pd.Series(["ok", "ok", "ok", "fail", "fail", "fail"]), neighbors=2)
    assert result.feature_names == ["pressure", "humidity"]
    assert result.to_frame()["feature"].tolist()[0] == "pressure"

    plain = relieff(frame.to_numpy(), ["ok", "ok", "ok", "fail", "fail", "fail"], neighbors=2)
    assert plain.feature_names is None
    assert set(plain.to_frame()["feature"]) == {"x0", "x1"}


def test_parallel_neighbor_search_gives_identical_results(multiclass_data, regression_signal) -> None:
    x, y = multiclass_data
    serial = relieff(x, y, mode="classification", sample_count=30, random_state=4)
    parallel = relieff(x, y, mode="classification", sample_count=30, random_state=4, n_jobs=2)
    np.testing.assert_array_equal(serial.ranking, parallel.ranking)
    np.testing.assert_array_equal(serial.weights, parallel.weights)

    x, y = regression_signal
    serial = relieff(x, y, sample_count=30, random_state=4)
    parallel = relieff(x, y, sample_count=30, random_state=4, n_jobs=2)
    np.testing.assert_array_equal(serial.weights, parallel.weights)
