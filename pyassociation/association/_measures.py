"""
Cell-wise association measures and their global aggregates.

Every local function takes `p_joint` with the table's shape, optionally
preceded by batch axes (one per permuted replicate), and an
IndependenceModel holding the quantities that only depend on the
marginals. Marginals are invariant under permutation, so the model is
built once per test and reused for every replicate.

Conventions:
    p_prod  product of the cell's marginal probabilities
    dif     p_joint - p_prod
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, NamedTuple, Sequence

import numpy as np
from numpy.typing import NDArray

from pyassociation.association._common import Measure
from pyassociation.core.exceptions import DataError


@dataclass(frozen=True)
class IndependenceModel:
    """
    Marginal-only quantities of a table under mutual independence.

    Attributes:
        p_prod: product of marginals per cell
        min_marginal: smallest marginal per cell
        pmi_ceiling: largest pmi attainable per cell given its marginals,
            min(log p_i) - sum(log p_i)
        n: sample size
    """
    p_prod: NDArray[np.float64]
    min_marginal: NDArray[np.float64]
    pmi_ceiling: NDArray[np.float64]
    n: int

    @classmethod
    def from_marginals(
        cls,
        marginals: Sequence[NDArray[np.float64]],
        n: int,
    ) -> IndependenceModel:
        if n < 1:
            raise DataError(f"sample size must be >= 1, got {n}")
        for i, m in enumerate(marginals):
            if np.any(m <= 0):
                raise DataError(
                    f"variable {i} has a zero-probability level",
                    variable=i,
                )
        logs = [np.log(m) for m in marginals]
        p_prod = reduce(np.multiply.outer, marginals)
        min_marginal = reduce(np.minimum.outer, marginals)
        log_sum = reduce(np.add.outer, logs)
        return cls(
            p_prod=p_prod,
            min_marginal=min_marginal,
            pmi_ceiling=np.log(min_marginal) - log_sum,
            n=int(n),
        )

    @property
    def ndim(self) -> int:
        return self.p_prod.ndim


# --- Local measures ---

def z_local(p_joint: NDArray, model: IndependenceModel) -> NDArray:
    """Ducher's Z: dif scaled by its largest attainable magnitude."""
    dif = p_joint - model.p_prod
    # both denominators are strictly positive once every level is observed
    up = dif / (model.min_marginal - model.p_prod)
    down = dif / model.p_prod
    z = np.where(dif > 0, up, np.where(dif < 0, down, 0.0))
    return np.clip(z, -1.0, 1.0)


def pmi_local(p_joint: NDArray, model: IndependenceModel) -> NDArray:
    """Pointwise mutual information; -inf where p_joint == 0."""
    with np.errstate(divide='ignore'):
        return np.log(p_joint / model.p_prod)


def npmi_local(p_joint: NDArray, model: IndependenceModel) -> NDArray:
    """Normalized pmi; exactly -1 where p_joint == 0."""
    pmi = pmi_local(p_joint, model)
    with np.errstate(divide='ignore', invalid='ignore'):
        h_joint = -np.log(p_joint)
        up = pmi / model.pmi_ceiling
        down = pmi / h_joint
    npmi = np.where(pmi > 0, up, np.where(pmi < 0, down, 0.0))
    npmi = np.where(p_joint == 0, -1.0, npmi)
    return np.clip(npmi, -1.0, 1.0)


def chi_residual_local(p_joint: NDArray, model: IndependenceModel) -> NDArray:
    """Pearson residual (O - E) / sqrt(E) written in probabilities."""
    dif = p_joint - model.p_prod
    return np.sqrt(model.n) * dif / np.sqrt(model.p_prod)


# --- Global aggregates ---

def weighted_global(p_joint: NDArray, local: NDArray, ndim: int) -> NDArray:
    """
    sum(p_joint * local) over the table axes.

    Empty cells contribute exactly 0, including pmi's -inf.
    """
    with np.errstate(invalid='ignore'):
        terms = np.where(p_joint > 0, p_joint * local, 0.0)
    return terms.sum(axis=tuple(range(-ndim, 0)))


def squares_global(p_joint: NDArray, local: NDArray, ndim: int) -> NDArray:
    """sum(local ** 2) over the table axes: Pearson's chi-squared."""
    return np.square(local).sum(axis=tuple(range(-ndim, 0)))


class MeasureStrategy(NamedTuple):
    local: Callable[[NDArray, IndependenceModel], NDArray]
    aggregate: Callable[[NDArray, NDArray, int], NDArray]


STRATEGIES: dict[Measure, MeasureStrategy] = {
    Measure.Z: MeasureStrategy(z_local, weighted_global),
    Measure.PMI: MeasureStrategy(pmi_local, weighted_global),
    Measure.NPMI: MeasureStrategy(npmi_local, weighted_global),
    Measure.CHI_RESIDUAL: MeasureStrategy(chi_residual_local, squares_global),
}

_uncovered = set(Measure) - set(STRATEGIES)
if _uncovered:
    raise ImportError(f"no strategy registered for {sorted(m.value for m in _uncovered)}")


def evaluate(
    measure: Measure,
    p_joint: NDArray[np.float64],
    model: IndependenceModel,
) -> tuple[NDArray[np.float64], Any]:
    """
    Local values and global aggregate of `measure`.

    With batch axes in front of the table axes, the global aggregate
    is an array over the batch axes; otherwise a 0-d value.
    """
    strategy = STRATEGIES[measure]
    local = strategy.local(p_joint, model)
    return local, strategy.aggregate(p_joint, local, model.ndim)
