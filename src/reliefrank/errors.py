from __future__ import annotations


class ReliefError(ValueError):
    """Base class for every input or data problem detected before sampling."""


class InvalidInputError(ReliefError):
    """Bad attribute matrix, X/Y size mismatch or a bad option value."""


class InvalidModeError(ReliefError):
    """Outcome type conflicts with the requested mode, or prior given for regression."""


class InsufficientDataError(ReliefError):
    """Too few observations left to compare neighbors."""


class InvalidPriorError(ReliefError):
    """Malformed class-probability specification."""


class DegenerateWeightsWarning(RuntimeWarning):
    """RReliefF denominators vanished; weights are reported as NaN."""
