"""Dominant left/right eigenpair of the subset-deflated Google operator."""

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from reduced_google.deadline import Deadline
from reduced_google.eigen.power import (
    DEFAULT_CHECK_INTERVAL,
    EPS_PAGERANK,
    STALL_THRESHOLD,
    calc_pagerank_project,
)
from reduced_google.eigen.types import STOP_DEGENERATE, Eigenpair
from reduced_google.errors import DegenerateSubsetError
from reduced_google.graph.types import Network
from reduced_google.operators.vectors import scalar_product

log = logging.getLogger(__name__)


def compute_eigenpair(
    network: Network,
    delta_alpha: float,
    subset: np.ndarray,
    eps: float = EPS_PAGERANK,
    check_interval: int = DEFAULT_CHECK_INTERVAL,
    stall_threshold: float = STALL_THRESHOLD,
    workers: int = 3,
    deadline: Deadline | None = None,
) -> Eigenpair:
    """Compute the biorthogonal dominant eigenpair and the plain PageRank.

    The three power iterations (left via G^T, right via G, both deflated at
    the subset, and the undeflated PageRank) are independent and run
    concurrently. The left vector is then rescaled so left . right == 1.

    Args:
        network: Graph to iterate over.
        delta_alpha: Damping probability alpha.
        subset: Distinguished node ids.
        eps: Relative convergence threshold.
        check_interval: Steps between convergence checks.
        stall_threshold: Relative difference below which stalls are detected.
        workers: Thread count for the three solves (1 runs them in turn).
        deadline: Optional deadline / cancel flag.

    Returns:
        Eigenpair with diagnostics from all three solves.

    Raises:
        DegenerateSubsetError: If deflation at the subset leaves no mass,
            so the left and right eigenvectors do not exist.
    """
    subset = np.asarray(subset, dtype=np.int64)
    no_subset = np.empty(0, dtype=np.int64)
    ones = np.ones(network.size)
    common = dict(
        eps=eps,
        check_interval=check_interval,
        stall_threshold=stall_threshold,
        deadline=deadline,
    )

    log.info("Computation of left and right eigenvectors of G_ss")
    with ThreadPoolExecutor(max_workers=max(1, min(3, workers))) as executor:
        left_future = executor.submit(
            calc_pagerank_project, network, delta_alpha, ones, subset,
            transpose=True, label="left", **common,
        )
        right_future = executor.submit(
            calc_pagerank_project, network, delta_alpha, ones, subset,
            label="right", **common,
        )
        pagerank_future = executor.submit(
            calc_pagerank_project, network, delta_alpha, ones, no_subset,
            label="pagerank", **common,
        )
        left_result = left_future.result()
        right_result = right_future.result()
        pagerank_result = pagerank_future.result()

    for result in (left_result, right_result):
        if result.stop_reason == STOP_DEGENERATE:
            raise DegenerateSubsetError(
                f"Subset of {subset.shape[0]} nodes absorbs all mass at "
                f"delta_alpha={delta_alpha}; no eigenvector outside it"
            )
    right = right_result.vector
    overlap = scalar_product(left_result.vector, right)
    if overlap == 0:
        raise DegenerateSubsetError(
            "Left and right eigenvectors are orthogonal; cannot normalize"
        )
    left = left_result.vector * (1.0 / overlap)
    sp = scalar_product(left, right)

    log.info(
        "dlambda = %.16g   diff = %.3e",
        right_result.dlambda,
        abs(right_result.dlambda - left_result.dlambda),
    )
    log.info("Biorthogonality check: psi_left^T * psi_right = %.16g", sp)

    return Eigenpair(
        right=right,
        left=left,
        pagerank=pagerank_result.vector,
        dlambda=right_result.dlambda,
        dlambda_left=left_result.dlambda,
        biorthogonality=sp,
        right_result=right_result,
        left_result=left_result,
        pagerank_result=pagerank_result,
    )
