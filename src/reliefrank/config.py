from __future__ import annotations

from typing import Final

DEFAULT_NEIGHBORS: Final[int] = 10
DEFAULT_REGRESSION_SIGMA: Final[float] = 50.0
DEFAULT_CLASSIFICATION_SIGMA: Final[float] = float("inf")
MIN_OBSERVATIONS: Final[int] = 2
EPS_DEGENERATE: Final[float] = 1e-12

SAMPLE_ALL: Final[str] = "all"


class Mode:
    CLASSIFICATION = "classification"
    REGRESSION = "regression"
    ALL = [CLASSIFICATION, REGRESSION]


class PriorName:
    EMPIRICAL = "empirical"
    UNIFORM = "uniform"

    # Record-form mapping keys: {"group": [...], "prob": [...]}.
    GROUP_FIELD = "group"
    PROB_FIELD = "prob"


class DistanceName:
    CITYBLOCK = "manhattan"
    HAMMING = "hamming"


class SwitchValue:
    ON = "on"
    OFF = "off"
