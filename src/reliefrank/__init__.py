from reliefrank.errors import (
    DegenerateWeightsWarning,
    InsufficientDataError,
    InvalidInputError,
    InvalidModeError,
    InvalidPriorError,
    ReliefError,
)
from reliefrank.pipeline import rank_features, relieff
from reliefrank.types import ReliefResult

__all__ = [
    "relieff",
    "rank_features",
    "ReliefResult",
    "ReliefError",
    "InvalidInputError",
    "InvalidModeError",
    "InsufficientDataError",
    "InvalidPriorError",
    "DegenerateWeightsWarning",
]
