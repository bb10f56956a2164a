"""
Column extraction and level resolution for table construction.

Turns user data (DataFrame, mapping of columns, or 2-D array) into a
row-aligned integer code matrix plus a canonical level tuple per
variable. All validation of the observations happens here.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pyassociation.core.exceptions import ConfigError, DataError
from pyassociation.core.validation import (
    check_distinct,
    check_min_levels,
    check_min_rows,
    check_no_missing,
)


def extract_columns(
    data: Any,
    variables: Sequence[Any],
) -> tuple[list[pd.Series], pd.Index]:
    """
    Pull the selected columns out of `data` as pandas Series.

    Returns:
        (columns, row_index) where every Series has the same length and
        row_index labels the observations.
    """
    if isinstance(variables, (str, bytes)) or not isinstance(variables, Sequence):
        raise ConfigError(
            f"variables must be a sequence of column keys, got {variables!r}",
            parameter="variables",
        )
    if len(variables) == 0:
        raise ConfigError("variables must not be empty", parameter="variables")
    check_distinct(list(variables), "variables")

    if isinstance(data, pd.DataFrame):
        for var in variables:
            if var not in data.columns:
                raise DataError(
                    f"{var!r}: no such column. Available: {list(data.columns)}",
                    variable=var,
                )
        columns = [data[var].reset_index(drop=True) for var in variables]
        index = data.index

    elif isinstance(data, Mapping):
        columns = []
        for var in variables:
            if var not in data:
                raise DataError(
                    f"{var!r}: no such column. Available: {list(data.keys())}",
                    variable=var,
                )
            columns.append(pd.Series(data[var], name=var).reset_index(drop=True))
        lengths = {len(col) for col in columns}
        if len(lengths) > 1:
            details = ", ".join(
                f"{var!r}={len(col)}" for var, col in zip(variables, columns)
            )
            raise DataError(f"Inconsistent column lengths: {details}")
        index = pd.RangeIndex(len(columns[0]))

    else:
        arr = np.asarray(data)
        if arr.ndim != 2:
            raise DataError(
                f"data: expected a DataFrame, a mapping of columns or a 2D array, "
                f"got {arr.ndim}D array with shape {arr.shape}"
            )
        columns = []
        for var in variables:
            if isinstance(var, bool) or not isinstance(var, (int, np.integer)):
                raise DataError(
                    f"{var!r}: array input requires integer column positions",
                    variable=var,
                )
            if not (0 <= var < arr.shape[1]):
                raise DataError(
                    f"{var!r}: column position out of range for "
                    f"{arr.shape[1]} columns",
                    variable=var,
                )
            columns.append(pd.Series(arr[:, var], name=var))
        index = pd.RangeIndex(arr.shape[0])

    check_min_rows(len(index))
    return columns, index


def _sorted_unique(values: pd.Series) -> list[Any]:
    """Sorted distinct values; mixed unorderable types sort by str()."""
    try:
        return np.unique(values.to_numpy()).tolist()
    except TypeError:
        return sorted(pd.unique(values.to_numpy()).tolist(), key=str)


def resolve_levels(
    column: pd.Series,
    name: Any,
    order: Sequence[Any] | None = None,
) -> tuple[tuple[Any, ...], NDArray[np.intp]]:
    """
    Decide the canonical level order of one column and encode it.

    Precedence: explicit `order`, then the categories of a pandas
    Categorical column, then sorted distinct values.

    Returns:
        (levels, codes) with codes[i] the position of row i's value
        in levels.
    """
    check_no_missing(column, name)

    if order is not None:
        levels = list(order)
        check_distinct(levels, f"level_order[{name!r}]")
        known = set(levels)
        observed = pd.unique(column.to_numpy()).tolist()
        unknown = [v for v in observed if v not in known]
        if unknown:
            raise DataError(
                f"{name!r}: values {unknown!r} are not listed in level_order",
                variable=name,
            )
        seen = set(observed)
        unobserved = [v for v in levels if v not in seen]
        if unobserved:
            raise DataError(
                f"{name!r}: levels {unobserved!r} have zero probability "
                f"(never observed)",
                variable=name,
            )
    elif isinstance(column.dtype, pd.CategoricalDtype):
        seen = set(column.unique().tolist())
        levels = [c for c in column.cat.categories.tolist() if c in seen]
    else:
        levels = _sorted_unique(column)

    check_min_levels(len(levels), name)

    codes = pd.Categorical(column.to_numpy(), categories=levels).codes
    codes = np.asarray(codes, dtype=np.intp)
    return tuple(levels), codes
