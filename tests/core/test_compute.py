"""
Tests for shared compute infrastructure: backends protocol, device
selection, timing and batch sizing.
"""

import time

import pytest

from pyassociation.association.backends import CPUAssociationBackend
from pyassociation.core import Backend
from pyassociation.core.compute import Timer, get_cpu_info, select_device
from pyassociation.core.compute.precision import DEFAULT_BATCH_SIZE, batch_size_for
from pyassociation.permutation.backends import CPUPermutationBackend


class TestBackendProtocol:

    @pytest.mark.parametrize("backend", [CPUAssociationBackend(), CPUPermutationBackend()])
    def test_cpu_backends_satisfy_protocol(self, backend):
        assert isinstance(backend, Backend)
        assert backend.name.startswith("cpu_")


class TestDevice:

    def test_cpu_selection(self):
        device = select_device("cpu")
        assert device.device_type == "cpu"
        assert not device.is_gpu
        assert device.torch_device == "cpu"
        assert str(device).startswith("CPU (")

    def test_cpu_info(self):
        assert get_cpu_info().device_index is None

    def test_auto_always_returns_a_device(self):
        assert select_device("auto").device_type in ("cpu", "cuda", "mps")


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section("replicates"):
            time.sleep(0.001)
        with timer.section("replicates"):
            time.sleep(0.001)
        timer.stop()
        result = timer.result()
        assert result["replicates"] >= 0.002
        assert result["total_seconds"] >= result["replicates"]

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError):
            Timer().stop()


class TestBatchSize:

    def test_small_tables_use_default(self):
        assert batch_size_for(4) == DEFAULT_BATCH_SIZE

    def test_large_tables_shrink_batch(self):
        assert batch_size_for(1_000_000) == 4

    def test_never_below_one(self):
        assert batch_size_for(10**9) == 1
