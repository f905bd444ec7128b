from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture()
def binary_signal() -> tuple[np.ndarray, np.ndarray]:
    # Column 0 decides the class; column 1 is noise.
    rng = np.random.default_rng(0)
    n = 100
    x0 = np.linspace(-5.0, 5.0, n)
    x1 = rng.normal(size=n)
    x = np.column_stack([x0, x1])
    y = np.where(x0 > 0, "pos", "neg").astype(object)
    return x, y


@pytest.fixture()
def multiclass_data() -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(3)
    n = 150
    x0 = np.linspace(-3.0, 3.0, n)
    x = np.column_stack([x0, rng.normal(size=n), rng.uniform(size=n)])
    y = np.zeros(n, dtype=int)
    y[x0 > 1] = 2
    y[(x0 >= -1) & (x0 <= 1)] = 1
    return x, y


@pytest.fixture()
def regression_signal() -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(7)
    n = 150
    x1 = np.linspace(-3.0, 3.0, n)
    x2 = rng.normal(size=n)
    x = np.column_stack([x1, x2])
    return x, 3.0 * x1
