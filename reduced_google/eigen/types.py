"""Result containers for the deflating power iteration."""

from dataclasses import dataclass

import numpy as np

# Stop reasons reported by the iterative loops.
STOP_CONVERGED = "converged"
STOP_STALLED = "stalled"
STOP_MAX_ITER = "max_iter"
STOP_DEADLINE = "deadline"
STOP_DEGENERATE = "degenerate"  # deflation left no finite mass to normalize


@dataclass(frozen=True)
class PowerIterationResult:
    """Outcome of one deflated power iteration.

    Hitting the iteration cap is not an error: the last iterate is returned
    with stop_reason "max_iter" and the final residuals for diagnostics.
    """

    vector: np.ndarray  # normalized to sum 1, zero on the subset
    dlambda: float  # mass absorbed by the subset in the last step
    iterations: int  # number of operator applications
    quality: float  # L1 difference of the last checked iterates
    quality_rel: float  # relative difference of the last checked iterates
    stop_reason: str

    @property
    def converged(self) -> bool:
        return self.stop_reason in (STOP_CONVERGED, STOP_STALLED)

    @property
    def eigenvalue(self) -> float:
        """Eigenvalue estimate 1 - dlambda of the deflated operator."""
        return 1.0 - self.dlambda


@dataclass(frozen=True)
class Eigenpair:
    """Biorthogonal dominant eigenvectors of the operator deflated at the subset.

    left is rescaled so that left . right == 1. pagerank is the unrestricted
    stationary vector of the same damped operator.
    """

    right: np.ndarray
    left: np.ndarray
    pagerank: np.ndarray
    dlambda: float  # from the right eigenvector
    dlambda_left: float
    biorthogonality: float  # left . right after rescaling
    right_result: PowerIterationResult
    left_result: PowerIterationResult
    pagerank_result: PowerIterationResult

    @property
    def converged(self) -> bool:
        return (
            self.right_result.converged
            and self.left_result.converged
            and self.pagerank_result.converged
        )
