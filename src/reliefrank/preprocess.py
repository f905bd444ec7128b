from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from numbers import Real
from typing import Any, cast

import numpy as np
import pandas as pd

from reliefrank.config import (
    DEFAULT_CLASSIFICATION_SIGMA,
    DEFAULT_REGRESSION_SIGMA,
    MIN_OBSERVATIONS,
    SAMPLE_ALL,
    Mode,
    PriorName,
    SwitchValue,
)
from reliefrank.errors import (
    InsufficientDataError,
    InvalidInputError,
    InvalidModeError,
    InvalidPriorError,
)
from reliefrank.types import (
    CategoricalOutcome,
    NumericOutcome,
    Outcome,
    PreparedData,
    ReliefOptions,
)

logger = logging.getLogger(__name__)


def _is_real_scalar(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, (bool, np.bool_))


def as_attribute_matrix(x: Any) -> tuple[np.ndarray, list[str] | None]:
    if isinstance(x, pd.DataFrame):
        bad = [
            str(col)
            for col, dtype in x.dtypes.items()
            if not pd.api.types.is_numeric_dtype(dtype)
            or pd.api.types.is_bool_dtype(dtype)
            or pd.api.types.is_complex_dtype(dtype)
        ]
        if bad:
            raise InvalidInputError(f"Attribute matrix must be numeric; non-numeric columns: {bad}")
        names = [str(c) for c in x.columns]
        return x.to_numpy(dtype=float, na_value=np.nan), names

    arr = np.asarray(x)
    if not np.issubdtype(arr.dtype, np.number) or np.issubdtype(arr.dtype, np.complexfloating):
        raise InvalidInputError(f"Attribute matrix must be numeric, got dtype={arr.dtype}")
    if arr.ndim != 2:
        raise InvalidInputError(f"Attribute matrix must be 2-D, got ndim={arr.ndim}")
    return arr.astype(float), None


def _char_block_labels(arr: np.ndarray) -> np.ndarray:
    # One label per row of a 2-D block of characters.
    return np.array(["".join(str(c) for c in row).strip() for row in arr], dtype=object)


def as_outcome(y: Any) -> Outcome:
    if isinstance(y, pd.DataFrame):
        if y.shape[1] != 1:
            raise InvalidInputError(f"Outcome frame must have one column, got {y.shape[1]}")
        y = y.iloc[:, 0]

    if isinstance(y, pd.Categorical):
        y = pd.Series(y)
    if not isinstance(y, pd.Series):
        arr = np.asarray(y)
        if arr.ndim == 2 and arr.shape[1] == 1:
            arr = arr.ravel()
        elif arr.ndim == 2 and arr.dtype.kind in "US":
            arr = _char_block_labels(arr)
        elif arr.ndim != 1:
            raise InvalidInputError(f"Outcome must be a vector, got shape={arr.shape}")
        y = pd.Series(arr)

    dtype = y.dtype
    if isinstance(dtype, pd.CategoricalDtype):
        return CategoricalOutcome(
            labels=np.asarray(y.astype(object), dtype=object),
            categories=list(dtype.categories),
        )
    if pd.api.types.is_bool_dtype(dtype):
        return CategoricalOutcome(labels=np.asarray(y.astype(object), dtype=object))
    if pd.api.types.is_complex_dtype(dtype):
        raise InvalidModeError(f"Unsupported outcome type {dtype}")
    if pd.api.types.is_numeric_dtype(dtype):
        return NumericOutcome(values=y.to_numpy(dtype=float, na_value=np.nan))
    if pd.api.types.is_object_dtype(dtype) and pd.api.types.infer_dtype(y, skipna=True) in {
        "integer",
        "floating",
        "mixed-integer-float",
    }:
        # Numbers with None holes.
        return NumericOutcome(values=pd.to_numeric(y).to_numpy(dtype=float, na_value=np.nan))
    if pd.api.types.is_object_dtype(dtype) or pd.api.types.is_string_dtype(dtype):
        return CategoricalOutcome(labels=np.asarray(y.astype(object), dtype=object))
    raise InvalidModeError(f"Unsupported outcome type {dtype}")


def resolve_mode(outcome: Outcome, mode: str | None) -> str:
    requested = None
    if mode is not None:
        if not isinstance(mode, str) or mode.lower() not in Mode.ALL:
            raise InvalidInputError(f"mode must be one of {Mode.ALL}, got {mode!r}")
        requested = mode.lower()

    if isinstance(outcome, NumericOutcome):
        return Mode.REGRESSION if requested is None else requested
    if requested == Mode.REGRESSION:
        raise InvalidModeError("Regression requires a numeric outcome")
    return Mode.CLASSIFICATION


def drop_missing_rows(x: np.ndarray, outcome: Outcome) -> tuple[np.ndarray, Outcome, np.ndarray]:
    missing = np.any(np.isnan(x), axis=1) | outcome.missing_mask()
    keep = np.where(~missing)[0]
    if keep.size < x.shape[0]:
        logger.debug("Dropped %d rows with missing values", x.shape[0] - keep.size)
    return x[keep], outcome.take(keep), keep


def class_codes(outcome: Outcome) -> tuple[np.ndarray, list[Any]]:
    if isinstance(outcome, NumericOutcome):
        labels = outcome.values
        categories = None
    else:
        labels = outcome.labels
        categories = outcome.categories

    if categories is not None:
        cat = pd.Categorical(labels, categories=categories).remove_unused_categories()
        return np.asarray(cat.codes, dtype=int), list(cat.categories)
    codes, uniques = pd.factorize(labels, sort=True)
    return np.asarray(codes, dtype=int), list(uniques)


def _mapping_lookup(mapping: Mapping, level: Any) -> Any:
    if level in mapping:
        return mapping[level]
    if str(level) in mapping:
        return mapping[str(level)]
    raise InvalidPriorError(f"Prior does not list probability for class {level!r}")


def _prior_from_mapping(prior: Mapping, levels: list[Any]) -> np.ndarray:
    keys = set(prior.keys())
    record_fields = {PriorName.GROUP_FIELD, PriorName.PROB_FIELD}
    if keys & record_fields and not keys - record_fields:
        if keys != record_fields:
            raise InvalidPriorError(
                f"Prior record must have both '{PriorName.GROUP_FIELD}' and '{PriorName.PROB_FIELD}' fields"
            )
        groups = list(np.atleast_1d(np.asarray(prior[PriorName.GROUP_FIELD], dtype=object)))
        probs = list(np.atleast_1d(np.asarray(prior[PriorName.PROB_FIELD], dtype=object)))
        if len(groups) != len(probs):
            raise InvalidPriorError(
                f"Prior record has {len(groups)} groups but {len(probs)} probabilities"
            )
        prior = dict(zip(groups, probs))

    values = [_mapping_lookup(prior, level) for level in levels]
    if not all(_is_real_scalar(v) for v in values):
        raise InvalidPriorError("Prior probabilities must be real numbers")
    out = np.asarray(values, dtype=float)
    if not np.all(np.isfinite(out)) or np.any(out < 0):
        raise InvalidPriorError("Prior probabilities must be finite and non-negative")
    return out


def class_probabilities(prior: Any, levels: list[Any], codes: np.ndarray) -> np.ndarray:
    n_levels = len(levels)
    if prior is None or (isinstance(prior, str) and prior.lower() == PriorName.EMPIRICAL):
        prob = np.bincount(codes, minlength=n_levels).astype(float)
    elif isinstance(prior, str) and prior.lower() == PriorName.UNIFORM:
        prob = np.ones(n_levels, dtype=float)
    elif isinstance(prior, pd.Series):
        prob = _prior_from_mapping(prior.to_dict(), levels)
    elif isinstance(prior, Mapping):
        prob = _prior_from_mapping(prior, levels)
    elif isinstance(prior, (list, tuple, np.ndarray)):
        arr = np.asarray(prior)
        if (
            not np.issubdtype(arr.dtype, np.number)
            or np.issubdtype(arr.dtype, np.complexfloating)
            or arr.ndim != 1
            or arr.shape[0] != n_levels
            or not np.all(np.isfinite(arr))
            or np.any(arr < 0)
            or np.all(arr == 0)
        ):
            raise InvalidPriorError(
                f"Numeric prior must be {n_levels} finite non-negative values, not all zero"
            )
        prob = arr.astype(float)
    else:
        raise InvalidPriorError(f"Unsupported prior specification of type {type(prior).__name__}")

    total = float(np.sum(prob))
    if total <= 0:
        raise InsufficientDataError("Every class has zero prior probability")
    return prob / total


def _resolve_neighbors(neighbors: Any) -> int:
    if not _is_real_scalar(neighbors) or not math.isfinite(neighbors) or neighbors <= 0:
        raise InvalidInputError(f"neighbors must be a positive number, got {neighbors!r}")
    return int(math.ceil(neighbors))


def _resolve_updates(sample_count: Any, n_obs: int) -> int:
    if isinstance(sample_count, str):
        if sample_count.lower() != SAMPLE_ALL:
            raise InvalidInputError(f"sample_count must be '{SAMPLE_ALL}' or a positive number")
        return n_obs
    if not _is_real_scalar(sample_count) or not math.isfinite(sample_count) or sample_count <= 0:
        raise InvalidInputError(
            f"sample_count must be '{SAMPLE_ALL}' or a positive number, got {sample_count!r}"
        )
    return min(int(math.ceil(sample_count)), n_obs)


def _resolve_switch(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, str) and value.lower() in {SwitchValue.ON, SwitchValue.OFF}:
        return value.lower() == SwitchValue.ON
    raise InvalidInputError(
        f"categorical_attributes must be a bool or '{SwitchValue.ON}'/'{SwitchValue.OFF}', got {value!r}"
    )


def _resolve_sigma(kernel_width: Any, mode: str) -> float:
    if kernel_width is None:
        if mode == Mode.REGRESSION:
            return DEFAULT_REGRESSION_SIGMA
        return DEFAULT_CLASSIFICATION_SIGMA
    if not _is_real_scalar(kernel_width) or math.isnan(kernel_width) or kernel_width <= 0:
        raise InvalidInputError(f"kernel_width must be a positive number, got {kernel_width!r}")
    return float(kernel_width)


def constant_attribute_mask(x: np.ndarray) -> np.ndarray:
    xmax = np.max(x, axis=0)
    xmin = np.min(x, axis=0)
    return (xmax - xmin) < np.spacing(np.abs(xmax))


def center_and_scale(x: np.ndarray) -> np.ndarray:
    xdiff = np.max(x, axis=0) - np.min(x, axis=0)
    return (x - np.mean(x, axis=0)) / xdiff


def _purge_zero_probability(
    x: np.ndarray,
    codes: np.ndarray,
    row_index: np.ndarray,
    class_prob: np.ndarray,
    levels: list[Any],
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, list[Any]]:
    zero = class_prob == 0
    if not np.any(zero):
        return x, codes, row_index, class_prob, levels

    keep_rows = ~zero[codes]
    if not np.any(keep_rows):
        raise InsufficientDataError("Every observation belongs to a class with zero prior probability")
    kept_levels = np.where(~zero)[0]
    recode = np.full(len(levels), -1, dtype=int)
    recode[kept_levels] = np.arange(kept_levels.size, dtype=int)
    logger.debug(
        "Purged %d zero-probability classes (%d rows)",
        int(np.sum(zero)),
        int(np.sum(~keep_rows)),
    )
    return (
        x[keep_rows],
        recode[codes[keep_rows]],
        row_index[keep_rows],
        class_prob[kept_levels],
        [levels[i] for i in kept_levels.tolist()],
    )


def prepare(x: Any, y: Any, options: ReliefOptions) -> PreparedData:
    x_arr, feature_names = as_attribute_matrix(x)
    outcome = as_outcome(y)
    mode = resolve_mode(outcome, options.mode)

    if mode == Mode.REGRESSION and options.prior is not None:
        raise InvalidModeError("prior is only valid for classification")
    if len(outcome) != x_arr.shape[0]:
        raise InvalidInputError(
            f"Outcome length ({len(outcome)}) does not match number of observations ({x_arr.shape[0]})"
        )
    n_attributes = int(x_arr.shape[1])

    x_arr, outcome, row_index = drop_missing_rows(x_arr, outcome)

    membership = None
    class_prob = None
    levels: list[Any] = []
    if mode == Mode.CLASSIFICATION:
        codes, levels = class_codes(outcome)
        class_prob = class_probabilities(options.prior, levels, codes)
        x_arr, codes, row_index, class_prob, levels = _purge_zero_probability(
            x_arr, codes, row_index, class_prob, levels
        )
        membership = np.zeros((codes.shape[0], len(levels)), dtype=bool)
        membership[np.arange(codes.shape[0]), codes] = True
        y_arr = codes
    else:
        # Regression mode is only resolved for numeric outcomes.
        y_arr = cast(NumericOutcome, outcome).values

    n_obs = int(x_arr.shape[0])
    if n_obs < MIN_OBSERVATIONS:
        raise InsufficientDataError(
            f"Need at least {MIN_OBSERVATIONS} complete observations, got {n_obs}"
        )

    n_neighbors = _resolve_neighbors(options.neighbors)
    n_updates = _resolve_updates(options.sample_count, n_obs)
    categorical = _resolve_switch(options.categorical_attributes)
    sigma = _resolve_sigma(options.kernel_width, mode)

    one_value = constant_attribute_mask(x_arr)
    accepted = np.where(~one_value)[0]
    rejected = np.where(one_value)[0]
    if rejected.size:
        logger.debug("Rejected %d constant attributes: %s", rejected.size, rejected.tolist())

    x_acc = x_arr[:, accepted]
    if not categorical and accepted.size:
        x_acc = center_and_scale(x_acc)

    return PreparedData(
        x=x_acc,
        y=y_arr,
        mode=mode,
        membership=membership,
        class_prob=class_prob,
        levels=levels,
        accepted=accepted,
        rejected=rejected,
        row_index=row_index,
        n_attributes=n_attributes,
        n_neighbors=n_neighbors,
        n_updates=n_updates,
        categorical=categorical,
        sigma=sigma,
        n_jobs=options.n_jobs,
        feature_names=feature_names,
    )
