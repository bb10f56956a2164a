"""
Association backends.

Available backends:
    cpu: CPUAssociationBackend - numpy reference implementation
"""

from pyassociation.association.backends.cpu import CPUAssociationBackend

__all__ = ["CPUAssociationBackend"]
