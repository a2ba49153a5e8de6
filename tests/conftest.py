"""Shared small networks and a dense reference for the Google operator."""

from pathlib import Path

import numpy as np
import pytest

from reduced_google.graph import Network, build_network


def dense_google(network: Network, delta_alpha: float) -> np.ndarray:
    """Dense column-stochastic G with G[to, from], for reference checks."""
    n = network.size
    S = np.zeros((n, n))
    for src, dst in zip(network.edge_source, network.edge_target):
        S[dst, src] += 1.0 / network.out_degree[src]
    for d in network.dangling:
        S[:, d] = 1.0 / n
    return (1.0 - delta_alpha) * S + delta_alpha / n


def write_graph_file(path: Path, size: int, edges: list[tuple[int, int]], sep: str = " ") -> Path:
    """Write a 1-indexed graph file with the given separator."""
    lines = [str(size), str(len(edges))]
    lines += [f"{a}{sep}{b}" for a, b in edges]
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def cycle_network() -> Network:
    """Directed 4-cycle 0 -> 1 -> 2 -> 3 -> 0."""
    return build_network(
        np.array([0, 1, 2, 3]), np.array([1, 2, 3, 0]), 4, base_name="cycle"
    )


@pytest.fixture
def dangling_network() -> Network:
    """0 -> 1, 0 -> 2, 1 -> 2; node 2 has no out-links."""
    return build_network(
        np.array([0, 0, 1]), np.array([1, 2, 2]), 3, base_name="dangling"
    )


@pytest.fixture
def triangle_network() -> Network:
    """0 -> 1, 0 -> 2, 1 -> 0, 1 -> 2, 2 -> 0."""
    return build_network(
        np.array([0, 0, 1, 1, 2]), np.array([1, 2, 0, 2, 0]), 3, base_name="triangle"
    )


@pytest.fixture
def mixed_network() -> Network:
    """Eight nodes with a dangling node and uneven out-degrees."""
    edges = [
        (0, 1), (0, 2), (0, 5),
        (1, 2), (1, 3),
        (2, 0), (2, 4),
        (3, 4), (3, 6), (3, 7),
        (4, 0),
        (5, 6),
        (6, 3), (6, 5), (6, 0),
        # node 7 dangling
    ]
    src = np.array([a for a, _ in edges])
    dst = np.array([b for _, b in edges])
    return build_network(src, dst, 8, base_name="mixed")
