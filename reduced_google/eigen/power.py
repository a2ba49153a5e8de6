"""Power iteration with continuous deflation at a node subset.

Each step applies the damped Google operator, removes the mass that lands
on the subset and renormalizes, so the iteration converges to the dominant
eigenvector of the operator restricted to the complement of the subset.
The removed mass per step converges to 1 - lambda.
"""

import logging
import math

import numpy as np

from reduced_google.deadline import Deadline
from reduced_google.eigen.types import (
    STOP_CONVERGED,
    STOP_DEADLINE,
    STOP_DEGENERATE,
    STOP_MAX_ITER,
    STOP_STALLED,
    PowerIterationResult,
)
from reduced_google.graph.types import Network
from reduced_google.operators.google import multiply_forward, multiply_transpose
from reduced_google.operators.vectors import (
    diff_norm1,
    diff_norm_rel,
    pagerank_normalize,
)

log = logging.getLogger(__name__)

EPS_PAGERANK = 1e-13
STALL_THRESHOLD = 1e-3
DEFAULT_CHECK_INTERVAL = 10


def max_iterations(delta_alpha: float, eps: float = EPS_PAGERANK) -> int:
    """Iteration cap: twice the steps for alpha-damped error to drop below eps."""
    return math.floor(-math.log(eps) / (delta_alpha + 3e-7)) * 2


def _absorb(vector: np.ndarray, subset: np.ndarray) -> float:
    """Zero the subset entries and return the mass removed."""
    if subset.shape[0] == 0:
        return 0.0
    absorbed = float(vector[subset].sum())
    vector[subset] = 0.0
    return absorbed


def _has_mass(vector: np.ndarray) -> bool:
    total = float(vector.sum())
    return total != 0.0 and math.isfinite(total)


def calc_pagerank_project(
    network: Network,
    delta_alpha: float,
    start: np.ndarray,
    subset: np.ndarray,
    transpose: bool = False,
    eps: float = EPS_PAGERANK,
    check_interval: int = DEFAULT_CHECK_INTERVAL,
    stall_threshold: float = STALL_THRESHOLD,
    deadline: Deadline | None = None,
    label: str = "",
) -> PowerIterationResult:
    """Deflated power iteration for the right (or, transposed, left) eigenvector.

    Convergence is checked every check_interval steps. The loop stops when
    the relative difference drops below eps, or once it is below
    stall_threshold but no longer shrinks by at least a factor
    1 + alpha / 2 between checks. If deflation leaves no finite mass it
    stops with "degenerate". Otherwise it runs to the cap and returns the
    last iterate.

    Args:
        network: Graph to iterate over.
        delta_alpha: Damping probability alpha.
        start: Starting vector; copied, never mutated.
        subset: Node ids deflated at every step (may be empty).
        transpose: Iterate with G^T to get the left eigenvector. The
            absorbed mass is then measured as 1 - sum after deflation.
        eps: Relative convergence threshold.
        check_interval: Steps between convergence checks.
        stall_threshold: Relative difference below which stalls are detected.
        deadline: Optional deadline / cancel flag polled every step.
        label: Name used in log messages.

    Returns:
        PowerIterationResult with the final normalized iterate.
    """
    multiply = multiply_transpose if transpose else multiply_forward
    subset = np.asarray(subset, dtype=np.int64)
    check_interval = max(1, check_interval)
    max_iter = max_iterations(delta_alpha, eps)
    qfak = 1.0 + delta_alpha / 2.0

    vector = np.array(start, dtype=np.float64)
    pagerank_normalize(vector)
    previous = vector.copy()
    quality = math.inf
    quality_rel = 1e40
    name = label or "power iteration"

    stop_reason = STOP_MAX_ITER
    steps = max_iter + 1
    dlambda = _absorb(vector, subset)
    if _has_mass(vector):
        pnorm = pagerank_normalize(vector)
    else:
        pnorm = 0.0
        stop_reason = STOP_DEGENERATE
        steps = 0
    if transpose:
        dlambda = 1.0 - pnorm

    log.debug("%s: max_iter = %d", name, max_iter)
    iterations = 0
    for i in range(steps):
        iterations = i + 1
        vector, previous = previous, vector
        multiply(network, delta_alpha, vector, previous)
        dlambda = _absorb(vector, subset)
        if not _has_mass(vector):
            # NaN or zero mass never satisfies the convergence tests.
            stop_reason = STOP_DEGENERATE
            break
        pnorm = pagerank_normalize(vector)
        if transpose:
            dlambda = 1.0 - pnorm

        if i % check_interval == 0 or i == max_iter:
            quality = diff_norm1(vector, previous)
            q1 = quality_rel
            quality_rel = diff_norm_rel(vector, previous)
            log.debug(
                "%5d  %18.10g  %18.10g  %25.16g  %25.16g",
                i, quality, quality_rel, dlambda, pnorm,
            )
            if quality_rel < eps:
                stop_reason = STOP_CONVERGED
                break
            if quality_rel < stall_threshold and quality_rel * qfak > q1:
                stop_reason = STOP_STALLED
                break

        if deadline is not None and deadline.expired():
            stop_reason = STOP_DEADLINE
            log.warning(
                "%s: deadline reached at i = %d (quality_rel = %.3e)",
                name, i, quality_rel,
            )
            break

    if stop_reason == STOP_MAX_ITER:
        log.warning(
            "%s: no convergence after %d iterations (quality_rel = %.3e)",
            name, max_iter, quality_rel,
        )
    elif stop_reason == STOP_DEGENERATE:
        log.warning(
            "%s: no mass left outside the subset after %d iterations",
            name, iterations,
        )
    log.info(
        "%s: convergence at i = %d with lambda = %.16g (%s)",
        name, max(0, iterations - 1), 1.0 - dlambda, stop_reason,
    )

    return PowerIterationResult(
        vector=vector,
        dlambda=dlambda,
        iterations=iterations,
        quality=quality,
        quality_rel=quality_rel,
        stop_reason=stop_reason,
    )


def compute_pagerank(
    network: Network,
    delta_alpha: float,
    eps: float = EPS_PAGERANK,
    check_interval: int = DEFAULT_CHECK_INTERVAL,
    deadline: Deadline | None = None,
) -> PowerIterationResult:
    """Unrestricted PageRank: power iteration from all ones with no deflation."""
    return calc_pagerank_project(
        network,
        delta_alpha,
        np.ones(network.size),
        np.empty(0, dtype=np.int64),
        eps=eps,
        check_interval=check_interval,
        deadline=deadline,
        label="pagerank",
    )
