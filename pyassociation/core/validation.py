"""
Input validation utilities for PyAssociation.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - Each function validates ONE thing
    - Column or parameter names included in all error messages
    - Observations problems raise DataError, parameter problems ConfigError
"""

from __future__ import annotations

import math
from numbers import Integral, Real
from typing import Any, Sequence

import numpy as np
import pandas as pd

from pyassociation.core.exceptions import (
    CardinalityError,
    ConfigError,
    DataError,
)


def check_no_missing(values: Any, name: object) -> None:
    """
    Verify a column contains no missing values.

    None, NaN, pd.NA and NaT all count as missing.

    Raises:
        DataError: If any value is missing
    """
    mask = np.asarray(pd.isna(values), dtype=bool)
    if mask.any():
        first = int(np.flatnonzero(mask)[0])
        raise DataError(
            f"{name!r}: {int(mask.sum())} missing value(s) (first at row {first}); "
            f"all observations must be fully observed",
            variable=name,
        )


def check_min_rows(n_rows: int, min_rows: int = 1) -> None:
    """
    Verify the data has at least `min_rows` observations.

    Raises:
        DataError: If there are too few rows
    """
    if n_rows < min_rows:
        raise DataError(
            f"data: requires at least {min_rows} observation(s), got {n_rows}"
        )


def check_min_levels(n_levels: int, name: object, min_levels: int = 2) -> None:
    """
    Verify a variable has at least `min_levels` observed levels.

    A single-valued variable carries no information.

    Raises:
        DataError: If the variable is degenerate
    """
    if n_levels < min_levels:
        raise DataError(
            f"{name!r}: requires at least {min_levels} distinct observed values, "
            f"got {n_levels}",
            variable=name,
        )


def check_cardinality(
    shape: Sequence[int],
    max_cells: int,
    names: Sequence[object],
) -> int:
    """
    Verify the product of level counts stays under the cell ceiling.

    The product is computed with Python integers, so it cannot overflow.

    Returns:
        The number of cells

    Raises:
        CardinalityError: If the table would exceed `max_cells`
    """
    n_cells = math.prod(int(s) for s in shape)
    if n_cells > max_cells:
        details = " x ".join(f"{name!r}={s}" for name, s in zip(names, shape))
        raise CardinalityError(
            f"table would have {n_cells} cells ({details}), "
            f"exceeding max_cells={max_cells}",
            n_cells=n_cells,
            max_cells=max_cells,
        )
    return n_cells


def check_distinct(items: Sequence[object], name: str) -> None:
    """
    Verify a sequence contains no duplicates.

    Raises:
        ConfigError: If an item appears more than once
    """
    seen: set[object] = set()
    for item in items:
        if item in seen:
            raise ConfigError(
                f"{name}: {item!r} is listed more than once",
                parameter=name,
            )
        seen.add(item)


def check_positive_int(value: Any, name: str, minimum: int = 1) -> int:
    """
    Verify `value` is an integer >= `minimum`.

    Booleans are rejected even though they are Integral.

    Raises:
        ConfigError: If the value is not an integer or is too small
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ConfigError(
            f"{name} must be an integer, got {type(value).__name__} {value!r}",
            parameter=name,
        )
    if value < minimum:
        raise ConfigError(
            f"{name} must be >= {minimum}, got {value}",
            parameter=name,
        )
    return int(value)


def check_open_unit_interval(value: Any, name: str) -> float:
    """
    Verify `value` is a real number strictly between 0 and 1.

    Raises:
        ConfigError: If the value is outside (0, 1)
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ConfigError(
            f"{name} must be a number in (0, 1), got {value!r}",
            parameter=name,
        )
    if not (0.0 < float(value) < 1.0):
        raise ConfigError(
            f"{name} must be in (0, 1), got {value}",
            parameter=name,
        )
    return float(value)
