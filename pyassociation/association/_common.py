"""
Common types for association measures.

Defines the closed Measure variant and AssociationParams, the payload
every association result carries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyassociation.core.exceptions import ConfigError


class Measure(str, Enum):
    """
    Local/global association measure.

    Z            Ducher's Z, in [-1, 1]
    PMI          pointwise mutual information, unbounded, -inf for empty cells
    NPMI         normalized pmi, in [-1, 1]
    CHI_RESIDUAL Pearson residual; squares sum to the chi-squared statistic
    """
    Z = "Z"
    PMI = "pmi"
    NPMI = "npmi"
    CHI_RESIDUAL = "chi_residual"

    @classmethod
    def parse(cls, value: Measure | str) -> Measure:
        """Accept a Measure, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            for member in cls:
                if key in (member.value.lower(), member.name.lower()):
                    return member
        valid = tuple(m.value for m in cls)
        raise ConfigError(
            f"measure must be one of {valid}, got {value!r}",
            parameter="measure",
        )

    @property
    def is_bounded(self) -> bool:
        """True for measures confined to [-1, 1]."""
        return self in (Measure.Z, Measure.NPMI)

    @property
    def global_name(self) -> str:
        """Conventional name of the global aggregate."""
        return {
            Measure.Z: "gZ",
            Measure.PMI: "MI",
            Measure.NPMI: "gNPMI",
            Measure.CHI_RESIDUAL: "X-squared",
        }[self]


@dataclass(frozen=True)
class AssociationParams:
    """
    Parameter payload for association results.

    Attributes
    ----------
    measure : Measure
        Which measure produced the values.
    variables : tuple
        Variables in table-axis order.
    levels : tuple of tuples
        Canonical level order per variable.
    local : ndarray
        One value per joint-event cell, same shape as the table.
        pmi holds -inf for cells with zero joint probability.
    global_value : float
        Probability-weighted sum of local values (Z, pmi, npmi) or sum
        of squares (chi_residual).
    extras : dict
        Measure-specific outputs, e.g. chisq_df and chisq_p_value.
    """
    measure: Measure
    variables: tuple[Any, ...]
    levels: tuple[tuple[Any, ...], ...]
    local: NDArray[np.floating[Any]]
    global_value: float
    extras: dict[str, Any]
