"""
Multiple testing correction for local permutation p-values.

Methods: "BH" (Benjamini-Hochberg, default; alias "fdr"), "BY",
"holm", "bonferroni", "none". Results agree with R's p.adjust().

This is a standalone utility function (no Design/Backend pipeline).
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyassociation.core.exceptions import ConfigError

VALID_METHODS = ("BH", "fdr", "BY", "holm", "bonferroni", "none")

_CANONICAL = {m.lower(): m for m in VALID_METHODS}
_CANONICAL["fdr"] = "BH"


def normalize_method(method: str) -> str:
    """Canonical spelling of an adjustment method, or ConfigError."""
    if isinstance(method, str) and method.lower() in _CANONICAL:
        return _CANONICAL[method.lower()]
    raise ConfigError(
        f"adjustment must be one of {VALID_METHODS}, got {method!r}",
        parameter="adjustment",
    )


def p_adjust(
    p: ArrayLike,
    method: str = "BH",
    n: int | None = None,
) -> NDArray[np.floating]:
    """
    Adjust p-values for multiple comparisons.

    Parameters
    ----------
    p : array-like
        p-values (flattened).
    method : str
        "BH" (default), "fdr" (alias for BH), "BY", "holm",
        "bonferroni" or "none". Case-insensitive.
    n : int or None
        Number of comparisons. Default len(p).

    Returns
    -------
    ndarray
        Adjusted p-values in input order, clipped to [0, 1]. NaN inputs
        stay NaN and do not count as comparisons.
    """
    method = normalize_method(method)

    p_arr = np.asarray(p, dtype=np.float64).ravel()
    result = p_arr.copy()

    valid = ~np.isnan(p_arr)
    pv = p_arr[valid]
    lp = len(pv)

    if n is None:
        n_tests = lp
    elif n < lp:
        raise ConfigError(
            f"n ({n}) must be >= number of p-values ({lp})",
            parameter="n",
        )
    else:
        n_tests = n

    if lp == 0 or method == "none":
        return result

    if method == "bonferroni":
        adjusted = pv * n_tests
    elif method == "holm":
        adjusted = _holm(pv, n_tests)
    elif method == "BH":
        adjusted = _step_up(pv, n_tests, 1.0)
    else:  # BY
        cm = np.sum(1.0 / np.arange(1, n_tests + 1, dtype=np.float64))
        adjusted = _step_up(pv, n_tests, cm)

    result[valid] = np.clip(adjusted, 0.0, 1.0)
    return result


def _holm(pv: NDArray, n: int) -> NDArray:
    """Holm's step-down method (controls FWER, no assumptions)."""
    lp = len(pv)
    order = np.argsort(pv, kind="stable")
    scaled = pv[order] * np.arange(n, n - lp, -1, dtype=np.float64)
    out = np.empty(lp, dtype=np.float64)
    out[order] = np.maximum.accumulate(scaled)
    return out


def _step_up(pv: NDArray, n: int, factor: float) -> NDArray:
    """
    Benjamini-Hochberg style step-up: p * factor * n / rank, made
    monotone by a running minimum from the largest p-value down.
    """
    lp = len(pv)
    order = np.argsort(pv, kind="stable")[::-1]
    ranks = np.arange(lp, 0, -1, dtype=np.float64)
    scaled = pv[order] * factor * n / ranks
    out = np.empty(lp, dtype=np.float64)
    out[order] = np.minimum.accumulate(scaled)
    return out
