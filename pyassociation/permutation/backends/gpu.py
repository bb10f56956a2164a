"""
GPU backend for permutation testing.

Permutations are drawn on the device as argsort of uniform noise, one
row order per block and replicate, and cells are tallied with
scatter_add_. Only the (batch, n_cells) count stack comes back to the
host, where the numpy measure strategies evaluate it.

Skipped if no GPU (CUDA or MPS) is available.
"""

from __future__ import annotations

import logging

import numpy as np

from pyassociation.association._measures import IndependenceModel
from pyassociation.association.backends.cpu import CPUAssociationBackend
from pyassociation.core.compute.precision import batch_size_for
from pyassociation.core.compute.timing import Timer
from pyassociation.core.exceptions import PermutationCancelled
from pyassociation.core.result import Result
from pyassociation.permutation._common import PermutationParams
from pyassociation.permutation._engine import (
    Accumulator,
    block_offsets,
    evaluate_counts,
    finalize,
)
from pyassociation.permutation.design import PermutationDesign
from pyassociation.permutation.progress import PermutationProgress

logger = logging.getLogger(__name__)

# Upper bound on (batch x rows) indices held on the device at once
_DEVICE_INDEX_BUDGET = 1 << 24


class GPUPermutationBackend:
    """
    GPU backend for grouped permutation testing.

    n_jobs is ignored: a single device stream evaluates all replicates.
    Cancellation is checked between batches.
    """

    def __init__(
        self,
        device: str = 'auto',
        progress: PermutationProgress | None = None,
    ):
        import torch

        self._torch = torch
        self._progress = progress

        if device == 'auto':
            if torch.cuda.is_available():
                self._device = 'cuda'
            elif hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
                self._device = 'mps'
            else:
                raise RuntimeError("No GPU available (need CUDA or MPS)")
        else:
            self._device = device

    @property
    def name(self) -> str:
        return f'gpu_{self._device}_permutation'

    def solve(self, design: PermutationDesign) -> Result[PermutationParams]:
        """Run the permutation test on the device."""
        torch = self._torch
        dev = self._device

        timer = Timer(sync_cuda=dev.startswith('cuda'))
        timer.start()

        with timer.section('observed'):
            observed = CPUAssociationBackend().solve(design.association)
            table = design.table
            model = IndependenceModel.from_marginals(table.marginals, table.n)
            offsets = [
                torch.as_tensor(term, dtype=torch.int64, device=dev)
                for term in block_offsets(table.codes, table.shape, design.blocks)
            ]

        generator = torch.Generator(device=dev)
        if design.seed is not None:
            generator.manual_seed(design.seed)
        else:
            generator.seed()

        n_rows, n_cells = table.n, table.n_cells
        batch = max(1, min(batch_size_for(n_cells), _DEVICE_INDEX_BUDGET // n_rows))
        acc = Accumulator(observed.params.local, observed.params.global_value)
        progress = self._progress
        if progress is not None:
            progress.start(design.iterations)

        logger.debug(
            "permutation test on %s: %d replicates, batch=%d",
            dev, design.iterations, batch,
        )

        with timer.section('permutation_replicates'):
            done = 0
            while done < design.iterations:
                if progress is not None and progress.cancelled:
                    raise PermutationCancelled(
                        f"permutation test cancelled after {done} "
                        f"of {design.iterations} iterations",
                        completed=done,
                        requested=design.iterations,
                    )
                b = min(batch, design.iterations - done)
                flat = torch.zeros((b, n_rows), dtype=torch.int64, device=dev)
                for term in offsets:
                    noise = torch.rand((b, n_rows), generator=generator, device=dev)
                    order = torch.argsort(noise, dim=1)
                    flat += term[order]
                counts = torch.zeros((b, n_cells), dtype=torch.int64, device=dev)
                counts.scatter_add_(1, flat, torch.ones_like(flat))
                evaluate_counts(design, model, counts.cpu().numpy(), acc)
                done += b
                if progress is not None:
                    progress.advance(b)

        with timer.section('adjustment'):
            params, diagnostics = finalize(design, observed.params, acc)

        timer.stop()

        return Result(
            params=params,
            info={
                **observed.info,
                **diagnostics,
                'iterations': design.iterations,
                'device': dev,
                'adjustment': design.adjustment,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=observed.warnings,
        )
