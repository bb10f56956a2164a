"""
Common types for permutation testing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyassociation.association._common import AssociationParams


@dataclass(frozen=True)
class PermutationParams(AssociationParams):
    """
    Association payload extended with permutation p-values.

    Attributes
    ----------
    p_local : ndarray
        Adjusted local p-values, same shape as `local`.
    p_local_raw : ndarray
        Unadjusted local p-values.
    p_global : float
        p-value of the global aggregate (never adjusted).
    iterations : int
        Number of permuted replicates.
    adjustment : str
        Canonical adjustment method ("BH", "BY", "holm", "bonferroni", "none").
    groups : tuple of tuples
        Permutation blocks as variable names, in block order.
    seed : int or None
        Seed the replicates were drawn from.
    """
    p_local: NDArray[np.floating[Any]]
    p_local_raw: NDArray[np.floating[Any]]
    p_global: float
    iterations: int
    adjustment: str
    groups: tuple[tuple[Any, ...], ...]
    seed: int | None
