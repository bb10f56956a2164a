"""
Contingency table module.

Public API:
    build_table(data, variables)   - n-dimensional frequency table
    discretize(values, breaks)     - numeric column -> ordered bins
    ContingencyTable               - the table type
"""

from pyassociation.contingency.table import ContingencyTable, tally
from pyassociation.contingency.solvers import build_table
from pyassociation.contingency.discretize import discretize

__all__ = [
    "build_table",
    "discretize",
    "tally",
    "ContingencyTable",
]
