"""
Backend-independent pieces of the permutation engine.

A permuted table is re-tallied from flat cell indices. The flat index
of a row is sum(code_i * stride_i) over the table axes, so it splits
into one additive term per permutation block: permuting a block's rows
permutes that block's term, and the permuted flat index is the sum of
the permuted terms.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from pyassociation.association._common import AssociationParams
from pyassociation.association._measures import IndependenceModel, evaluate
from pyassociation.core.exceptions import NumericalError
from pyassociation.permutation._common import PermutationParams
from pyassociation.permutation._p_adjust import p_adjust
from pyassociation.permutation.design import PermutationDesign

logger = logging.getLogger(__name__)


def block_offsets(
    codes: NDArray[np.intp],
    shape: tuple[int, ...],
    blocks: tuple[tuple[int, ...], ...],
) -> list[NDArray[np.int64]]:
    """Per-block contribution of every row to its flat cell index."""
    strides = [math.prod(shape[i + 1:]) for i in range(len(shape))]
    offsets = []
    for block in blocks:
        term = np.zeros(codes.shape[0], dtype=np.int64)
        for axis in block:
            term += codes[:, axis].astype(np.int64) * strides[axis]
        offsets.append(term)
    return offsets


@dataclass
class Accumulator:
    """
    Exceedance tallies of one chunk of replicates.

    Counts permuted values whose absolute value strictly exceeds the
    observed absolute value. Integer counts merge exactly by addition.
    """
    observed_local: NDArray[np.float64]
    observed_global: float
    local_counts: NDArray[np.int64] = field(init=False)
    global_count: int = field(init=False, default=0)
    replicates: int = field(init=False, default=0)

    def __post_init__(self):
        self._abs_local = np.abs(self.observed_local)
        self._abs_global = abs(self.observed_global)
        self.local_counts = np.zeros(self.observed_local.shape, dtype=np.int64)

    def add(self, local: NDArray[np.float64], global_values: NDArray[np.float64]) -> None:
        """Record a batch: local (B, *shape), global_values (B,)."""
        self.local_counts += np.sum(np.abs(local) > self._abs_local, axis=0)
        self.global_count += int(np.sum(np.abs(global_values) > self._abs_global))
        self.replicates += int(local.shape[0])

    def merge(self, other: Accumulator) -> None:
        self.local_counts += other.local_counts
        self.global_count += other.global_count
        self.replicates += other.replicates


def evaluate_counts(
    design: PermutationDesign,
    model: IndependenceModel,
    counts: NDArray[np.int64],
    acc: Accumulator,
) -> None:
    """Evaluate a (B, n_cells) stack of permuted counts into `acc`."""
    table = design.table
    p_joint = counts.reshape((counts.shape[0],) + table.shape) / table.n
    local, global_values = evaluate(design.measure, p_joint, model)
    acc.add(local, np.asarray(global_values))


def split_iterations(iterations: int, n_chunks: int) -> list[int]:
    """Chunk sizes summing to `iterations`, no empty chunks."""
    n_chunks = max(1, min(n_chunks, iterations))
    base, extra = divmod(iterations, n_chunks)
    return [base + (1 if i < extra else 0) for i in range(n_chunks)]


def check_integrity(acc: Accumulator, iterations: int) -> None:
    """
    Raises:
        NumericalError: wrong replicate count or impossible tallies
    """
    if acc.replicates != iterations:
        raise NumericalError(
            f"accumulator holds {acc.replicates} replicates, expected {iterations}",
            expected=iterations,
            actual=acc.replicates,
        )
    if (
        np.any(acc.local_counts < 0)
        or np.any(acc.local_counts > iterations)
        or not 0 <= acc.global_count <= iterations
    ):
        raise NumericalError(
            "exceedance counts outside [0, iterations]",
            expected=iterations,
            actual=acc.replicates,
        )


def finalize(
    design: PermutationDesign,
    observed: AssociationParams,
    acc: Accumulator,
) -> tuple[PermutationParams, dict]:
    """Turn a merged accumulator into p-values and diagnostics."""
    check_integrity(acc, design.iterations)

    iterations = design.iterations
    p_raw = acc.local_counts / iterations
    p_adjusted = p_adjust(p_raw.ravel(), design.adjustment).reshape(p_raw.shape)
    p_global = acc.global_count / iterations

    logger.debug(
        "permutation test finished: %d replicates, global exceedances %d",
        iterations, acc.global_count,
    )

    params = PermutationParams(
        measure=observed.measure,
        variables=observed.variables,
        levels=observed.levels,
        local=observed.local,
        global_value=observed.global_value,
        extras=observed.extras,
        p_local=p_adjusted,
        p_local_raw=p_raw,
        p_global=float(p_global),
        iterations=iterations,
        adjustment=design.adjustment,
        groups=design.block_variables,
        seed=design.seed,
    )
    diagnostics = {
        'p_global_se': math.sqrt(p_global * (1.0 - p_global) / iterations),
        'p_resolution': 1.0 / iterations,
        'n_blocks': len(design.blocks),
    }
    return params, diagnostics
