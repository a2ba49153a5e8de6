"""Restricted-matrix solver: resolvent expansion per distinguished node.

For each subset node a unit impulse is pushed once through G, the part
landing back on the subset gives G_rr, and the rest is split by the
projectors P and Q of the deflated operator. The Q part is propagated with
the Neumann series s = Q b + (QG) Q b + (QG)^2 Q b + ... restricted to the
complement of the subset. One more application of G maps everything back
onto the subset.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed

import numpy as np

from reduced_google.deadline import Deadline
from reduced_google.eigen.pair import compute_eigenpair
from reduced_google.eigen.power import (
    DEFAULT_CHECK_INTERVAL,
    EPS_PAGERANK,
    max_iterations,
)
from reduced_google.eigen.types import (
    STOP_CONVERGED,
    STOP_DEADLINE,
    STOP_MAX_ITER,
    Eigenpair,
)
from reduced_google.errors import DimensionError
from reduced_google.graph.loader import validate_subset
from reduced_google.graph.types import Network
from reduced_google.operators.google import multiply_forward
from reduced_google.operators.vectors import diff_norm1, norm1, project_p, project_q
from reduced_google.reduced.types import ColumnResult, ReducedMatrices

log = logging.getLogger(__name__)


def compute_column(
    network: Network,
    eigenpair: Eigenpair,
    subset: np.ndarray,
    i: int,
    delta_alpha: float,
    max_iter: int,
    deadline: Deadline | None = None,
    log_interval: int = 10,
) -> ColumnResult:
    """Compute column i of the five restricted matrices.

    All scratch vectors are private to the call, so columns can run
    concurrently against a shared network and eigenpair.

    Args:
        network: Graph to propagate over.
        eigenpair: Biorthogonal dominant eigenpair deflated at the subset.
        subset: Distinguished node ids.
        i: Column index into subset.
        delta_alpha: Damping probability alpha.
        max_iter: Cap on resolvent iterations.
        deadline: Optional deadline / cancel flag polled every iteration.
        log_interval: Iterations between DEBUG progress lines.

    Returns:
        ColumnResult holding column i of G_rr, G_pr, G_qr and G_I.
    """
    n = network.size
    right, left = eigenpair.right, eigenpair.left

    input_ = np.zeros(n)
    output = np.empty(n)
    t = np.empty(n)
    f2 = np.empty(n)

    input_[subset[i]] = 1.0
    multiply_forward(network, delta_alpha, output, input_)
    g_rr = output[subset].copy()
    output[subset] = 0.0

    s = output.copy()
    project_p(right, left, output, eigenpair.dlambda)
    project_q(right, left, s)
    f = s.copy()

    quality = np.inf
    stop_reason = STOP_MAX_ITER
    iterations = max_iter
    for l in range(max_iter):
        t[:] = s
        multiply_forward(network, delta_alpha, f2, f, normalize=False)
        f, f2 = f2, f
        f[subset] = 0.0
        project_q(right, left, f)
        s += f
        quality = diff_norm1(t, s)
        if l % log_interval == 0:
            log.debug("%5d  %5d  %18.10g  %18.10g", i, l, quality, norm1(f))
        if quality <= 0:
            stop_reason = STOP_CONVERGED
            iterations = l + 1
            break
        if deadline is not None and deadline.expired():
            stop_reason = STOP_DEADLINE
            iterations = l + 1
            break

    if stop_reason != STOP_CONVERGED:
        log.warning(
            "Column %d stopped (%s) after %d iterations, quality = %.3e",
            i, stop_reason, iterations, quality,
        )

    g_pr = multiply_forward(network, delta_alpha, f, output, normalize=False)[subset]
    g_qr = multiply_forward(network, delta_alpha, f, s, normalize=False)[subset]
    output += s
    g_i = multiply_forward(network, delta_alpha, f, output, normalize=False)[subset]

    return ColumnResult(
        index=i,
        g_rr=g_rr,
        g_pr=g_pr,
        g_qr=g_qr,
        g_i=g_i,
        iterations=iterations,
        quality=float(quality),
        stop_reason=stop_reason,
    )


def compute_reduced_matrices(
    network: Network,
    subset: np.ndarray,
    delta_alpha: float,
    eigenpair: Eigenpair | None = None,
    workers: int | None = None,
    eps: float = EPS_PAGERANK,
    check_interval: int = DEFAULT_CHECK_INTERVAL,
    deadline: Deadline | None = None,
    log_interval: int = 10,
) -> ReducedMatrices:
    """Compute G_R, G_rr, G_pr, G_qr and G_I for the distinguished subset.

    Columns are independent given the shared eigenpair and are dispatched
    to a bounded thread pool; each finished column is written by this
    thread only, so completion order does not affect the result.

    Args:
        network: Graph to propagate over.
        subset: Distinguished node ids (0-indexed, no duplicates).
        delta_alpha: Damping probability alpha.
        eigenpair: Precomputed eigenpair; computed here when None.
        workers: Pool size, defaults to os.cpu_count().
        eps: Convergence threshold, also sets the iteration cap.
        check_interval: Eigensolver convergence check cadence.
        deadline: Optional deadline / cancel flag.
        log_interval: Iterations between DEBUG progress lines.

    Returns:
        ReducedMatrices with per-column diagnostics.

    Raises:
        DimensionError: If subset ids or eigenvector lengths do not match
            the network.
    """
    subset = np.asarray(subset, dtype=np.int64)
    validate_subset(network, subset)
    workers = workers or os.cpu_count() or 1

    if eigenpair is None:
        eigenpair = compute_eigenpair(
            network,
            delta_alpha,
            subset,
            eps=eps,
            check_interval=check_interval,
            workers=workers,
            deadline=deadline,
        )
    for name in ("right", "left"):
        vec = getattr(eigenpair, name)
        if vec.shape != (network.size,):
            raise DimensionError(
                f"Eigenvector {name} has shape {vec.shape}, "
                f"network size is {network.size}"
            )

    result = ReducedMatrices.zeros(subset, eigenpair)
    nr = result.size
    if nr == 0:
        return result

    max_iter = max_iterations(delta_alpha, eps)
    log.info(
        "Computing %d columns with %d workers (max_iter = %d)",
        nr, min(workers, nr), max_iter,
    )

    columns: list[ColumnResult | None] = [None] * nr
    with ThreadPoolExecutor(max_workers=min(workers, nr)) as executor:
        futures = [
            executor.submit(
                compute_column,
                network,
                eigenpair,
                subset,
                i,
                delta_alpha,
                max_iter,
                deadline,
                log_interval,
            )
            for i in range(nr)
        ]
        for done, future in enumerate(as_completed(futures), start=1):
            column = future.result()
            result.set_column(column)
            columns[column.index] = column
            log.info(
                "Column %d done (%d/%d): %d iterations, quality = %.3e",
                column.index, done, nr, column.iterations, column.quality,
            )

    result.columns = [c for c in columns if c is not None]
    result.check_shapes()
    return result
