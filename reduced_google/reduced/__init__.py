"""Restricted-matrix solver for the distinguished node subset."""

from reduced_google.reduced.solver import compute_column, compute_reduced_matrices
from reduced_google.reduced.types import ColumnResult, ReducedMatrices

__all__ = [
    "ColumnResult",
    "ReducedMatrices",
    "compute_column",
    "compute_reduced_matrices",
]
