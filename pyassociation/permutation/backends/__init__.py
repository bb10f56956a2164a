"""
Permutation backends.

Available backends:
    cpu: CPUPermutationBackend - numpy, chunked over a thread pool
    gpu: GPUPermutationBackend - torch on CUDA or MPS (imported lazily)
"""

from pyassociation.permutation.backends.cpu import CPUPermutationBackend

__all__ = ["CPUPermutationBackend"]
