"""
Tests for the GPU permutation backend.

Skipped if no GPU (CUDA or MPS) is available.
"""

import numpy as np
import pytest

# Try importing torch to check for GPU availability
try:
    import torch
    HAS_CUDA = torch.cuda.is_available()
    HAS_MPS = hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()
    HAS_GPU = HAS_CUDA or HAS_MPS
except ImportError:
    HAS_GPU = False

from pyassociation import PermutationProgress, permutation_test
from pyassociation.core.exceptions import PermutationCancelled

pytestmark = pytest.mark.skipif(
    not HAS_GPU,
    reason="No GPU available (need CUDA or MPS)"
)


class TestGPUPermutation:

    def test_drug_scenario(self, drug_data):
        result = permutation_test(drug_data, ["drug", "recovered"], iterations=1000,
                                  seed=42, backend="gpu")
        assert result.backend_name.startswith("gpu_")
        assert result.p_global < 0.01

    def test_reproducible(self, linked_data):
        a = permutation_test(linked_data, ["a", "b", "c"], iterations=300,
                             seed=3, backend="gpu")
        b = permutation_test(linked_data, ["a", "b", "c"], iterations=300,
                             seed=3, backend="gpu")
        np.testing.assert_array_equal(a.p_local_raw, b.p_local_raw)

    def test_agrees_with_cpu_on_null(self, independent_data):
        cpu = permutation_test(independent_data, ["a", "b"], iterations=2000, seed=1)
        gpu = permutation_test(independent_data, ["a", "b"], iterations=2000,
                               seed=1, backend="gpu")
        assert abs(cpu.p_global - gpu.p_global) < 0.1

    def test_grouped(self, linked_data):
        result = permutation_test(linked_data, ["a", "b", "c"], iterations=200,
                                  seed=9, groups=[["a", "b"]], backend="gpu")
        assert result.groups == (("a", "b"), ("c",))
        assert result.iterations == 200

    def test_cancel(self, drug_data):
        progress = PermutationProgress()
        progress.cancel()
        with pytest.raises(PermutationCancelled):
            permutation_test(drug_data, ["drug", "recovered"], iterations=100,
                             backend="gpu", progress=progress)

    def test_auto_selects_gpu(self, drug_data):
        result = permutation_test(drug_data, ["drug", "recovered"], iterations=50,
                                  seed=0, backend="auto")
        assert result.backend_name.startswith("gpu_")
