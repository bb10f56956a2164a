"""
Binning of a numeric column into ordered categorical levels.

Bins are left-closed and right-open, [b_i, b_{i+1}), except the last
one, which also includes its right edge so the largest break is a valid
value. The result is an ordered pandas Categorical whose category order
is the bin order, so build_table() keeps that order.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
import pandas as pd

from pyassociation.core.exceptions import ConfigError, DataError
from pyassociation.core.validation import check_no_missing


def _default_label(lo: float, hi: float, last: bool) -> str:
    closing = "]" if last else ")"
    return f"[{lo:g}, {hi:g}{closing}"


def discretize(
    values: Any,
    breaks: Sequence[float],
    *,
    labels: Sequence[Any] | None = None,
    name: Any = None,
) -> pd.Categorical:
    """
    Cut a numeric column into ordered bins.

    Parameters
    ----------
    values : array-like
        Numeric observations. Missing values raise DataError.
    breaks : sequence of float
        Strictly increasing bin edges, at least 2.
    labels : sequence, optional
        One label per bin. Defaults to interval strings like "[0, 1)".
    name : optional
        Column name used in error messages.

    Returns
    -------
    pandas.Categorical
        Ordered categorical with one category per bin (empty bins kept).
    """
    edges = np.asarray(breaks, dtype=np.float64).ravel()
    if edges.size < 2:
        raise ConfigError(
            f"breaks must have at least 2 edges, got {edges.size}",
            parameter="breaks",
        )
    if not np.all(np.isfinite(edges)) or np.any(np.diff(edges) <= 0):
        raise ConfigError(
            f"breaks must be finite and strictly increasing, got {edges.tolist()}",
            parameter="breaks",
        )

    n_bins = edges.size - 1
    if labels is None:
        labels = [
            _default_label(edges[i], edges[i + 1], i == n_bins - 1)
            for i in range(n_bins)
        ]
    elif len(labels) != n_bins:
        raise ConfigError(
            f"labels must have {n_bins} entries (one per bin), got {len(labels)}",
            parameter="labels",
        )

    column = name if name is not None else "values"
    check_no_missing(values, column)
    x = np.asarray(values, dtype=np.float64).ravel()

    outside = (x < edges[0]) | (x > edges[-1])
    if np.any(outside):
        first = float(x[np.flatnonzero(outside)[0]])
        raise DataError(
            f"{column!r}: {int(outside.sum())} value(s) outside "
            f"[{edges[0]:g}, {edges[-1]:g}] (first: {first:g})",
            variable=name,
        )

    # searchsorted(side='right') - 1 gives the left-closed bin; the top
    # edge itself folds into the last bin
    codes = np.searchsorted(edges, x, side='right') - 1
    codes = np.minimum(codes, n_bins - 1)

    return pd.Categorical.from_codes(codes, categories=list(labels), ordered=True)
