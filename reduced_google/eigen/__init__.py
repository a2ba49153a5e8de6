"""Deflating power-iteration eigensolver."""

from reduced_google.eigen.pair import compute_eigenpair
from reduced_google.eigen.power import (
    EPS_PAGERANK,
    calc_pagerank_project,
    compute_pagerank,
    max_iterations,
)
from reduced_google.eigen.types import (
    STOP_CONVERGED,
    STOP_DEADLINE,
    STOP_DEGENERATE,
    STOP_MAX_ITER,
    STOP_STALLED,
    Eigenpair,
    PowerIterationResult,
)

__all__ = [
    "EPS_PAGERANK",
    "STOP_CONVERGED",
    "STOP_DEADLINE",
    "STOP_DEGENERATE",
    "STOP_MAX_ITER",
    "STOP_STALLED",
    "Eigenpair",
    "PowerIterationResult",
    "calc_pagerank_project",
    "compute_eigenpair",
    "compute_pagerank",
    "max_iterations",
]
