"""Graph data structures for the stochastic operators."""

from dataclasses import dataclass

import numpy as np
import scipy.sparse


@dataclass(frozen=True)
class Network:
    """Immutable directed graph in compressed sparse row form.

    Edges of node i occupy edge_target[first_pos[i]:first_pos[i + 1]].
    The scipy matrices and inv_out_degree are derived once at build time
    so the operators only ever read them. Uses frozen=True for
    immutability but omits slots=True since numpy/scipy objects don't
    interact well with __slots__.
    """

    size: int  # number of nodes N
    link_count: int  # number of edges M
    edge_source: np.ndarray  # int64 (M,), non-decreasing
    edge_target: np.ndarray  # int64 (M,)
    first_pos: np.ndarray  # int64 (N + 1,), CSR offsets
    out_degree: np.ndarray  # int64 (N,)
    dangling: np.ndarray  # int64, sorted nodes with out_degree == 0
    inv_out_degree: np.ndarray  # float64 (N,), 0 at dangling nodes
    adjacency: scipy.sparse.csr_matrix  # rows = source, cols = target
    adjacency_t: scipy.sparse.csr_matrix  # rows = target, cols = source
    base_name: str = ""  # graph name used for result file naming

    @property
    def dangling_count(self) -> int:
        return int(self.dangling.shape[0])
