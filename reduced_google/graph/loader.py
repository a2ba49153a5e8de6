"""Text-file readers for the graph, the node subset and node names.

Graph file layout: node count N, edge count M, then one "from to" pair per
line (1-indexed, space or tab separated), grouped by ascending source. The
reader never sorts; unsorted input is rejected.
"""

import logging
import time
from pathlib import Path

import numpy as np
import scipy.sparse

from reduced_google.errors import DimensionError, StructuralError
from reduced_google.graph.types import Network

log = logging.getLogger(__name__)

GRAPH_SUFFIX = ".dat_reduce"


def network_base_name(path: str | Path) -> str:
    """Graph name used in result file names.

    Strips the conventional ".dat_reduce" suffix, or the last extension
    for any other file name.
    """
    name = Path(path).name
    if name.endswith(GRAPH_SUFFIX):
        return name[: -len(GRAPH_SUFFIX)]
    return Path(name).stem


def build_network(
    edge_from: np.ndarray,
    edge_to: np.ndarray,
    size: int,
    base_name: str = "",
) -> Network:
    """Build the compressed network from a 0-indexed, source-grouped edge list.

    first_pos[i] is the position of the first edge whose source is >= i,
    which fills the offsets of nodes without outgoing edges with the
    position of the next populated node.

    Args:
        edge_from: Source node of each edge, non-decreasing.
        edge_to: Target node of each edge.
        size: Number of nodes N.
        base_name: Graph name for result naming.

    Returns:
        Network with dangling nodes and operator matrices precomputed.

    Raises:
        StructuralError: If sources are unsorted, arrays differ in length
            or any endpoint lies outside [0, size).
    """
    edge_source = np.asarray(edge_from, dtype=np.int64).ravel()
    edge_target = np.asarray(edge_to, dtype=np.int64).ravel()

    if size < 0:
        raise StructuralError(f"Node count must be non-negative, got {size}")
    if edge_source.shape != edge_target.shape:
        raise StructuralError(
            f"Unequal link arrays: {edge_source.shape[0]} sources, "
            f"{edge_target.shape[0]} targets"
        )
    link_count = int(edge_source.shape[0])
    if link_count > 0:
        lo = min(edge_source.min(), edge_target.min())
        hi = max(edge_source.max(), edge_target.max())
        if lo < 0 or hi >= size:
            raise StructuralError(
                f"Edge endpoints must lie in [0, {size}), found range "
                f"[{lo}, {hi}]"
            )
        if np.any(np.diff(edge_source) < 0):
            raise StructuralError(
                "Edges must be grouped by source node in ascending order"
            )

    first_pos = np.searchsorted(
        edge_source, np.arange(size + 1), side="left"
    ).astype(np.int64)
    out_degree = np.diff(first_pos)
    dangling = np.flatnonzero(out_degree == 0).astype(np.int64)

    inv_out_degree = np.zeros(size, dtype=np.float64)
    linked = out_degree > 0
    inv_out_degree[linked] = 1.0 / out_degree[linked]

    # Duplicate edges stay as separate entries; mat-vec sums them, which
    # matches splitting a node's mass once per listed link.
    adjacency = scipy.sparse.csr_matrix(
        (np.ones(link_count, dtype=np.float64), edge_target, first_pos),
        shape=(size, size),
    )
    adjacency_t = adjacency.T.tocsr()

    return Network(
        size=size,
        link_count=link_count,
        edge_source=edge_source,
        edge_target=edge_target,
        first_pos=first_pos,
        out_degree=out_degree,
        dangling=dangling,
        inv_out_degree=inv_out_degree,
        adjacency=adjacency,
        adjacency_t=adjacency_t,
        base_name=base_name,
    )


def _parse_header(lines: list[str], path: Path) -> tuple[int, int]:
    if len(lines) < 2:
        raise StructuralError(
            f"{path}: expected node and edge counts on the first two lines"
        )
    try:
        return int(lines[0].strip()), int(lines[1].strip())
    except ValueError as e:
        raise StructuralError(f"{path}: unparsable header: {e}") from e


def _parse_edge(line: str, lineno: int, path: Path) -> tuple[int, int]:
    tokens = line.split(" ")
    if len(tokens) != 2:
        tokens = line.split("\t")
    if len(tokens) != 2:
        tokens = line.split()
    if len(tokens) != 2:
        raise StructuralError(
            f"{path}:{lineno}: expected 'from to', got {line!r}"
        )
    try:
        return int(tokens[0]), int(tokens[1])
    except ValueError as e:
        raise StructuralError(f"{path}:{lineno}: {e}") from e


def read_network(path: str | Path, limit: int | None = None) -> Network:
    """Read a graph file into a Network.

    In the default mode the number of edges read must match the declared
    edge count. In limited mode the network has exactly `limit` nodes,
    edges with an endpoint above the ceiling are dropped and the edge
    count is taken from the survivors.

    Args:
        path: Graph text file.
        limit: Optional 1-indexed node-id ceiling.

    Returns:
        Network built from the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        StructuralError: If the file is malformed.
    """
    path = Path(path)
    t0 = time.monotonic()
    with open(path) as f:
        lines = f.read().split("\n")

    size, declared_links = _parse_header(lines, path)

    sources: list[int] = []
    targets: list[int] = []
    for lineno, line in enumerate(lines[2:], start=3):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        n1, n2 = _parse_edge(line.strip(), lineno, path)
        if limit is not None and (n1 > limit or n2 > limit):
            continue
        sources.append(n1 - 1)
        targets.append(n2 - 1)

    if limit is not None:
        size = limit
    elif len(sources) != declared_links:
        raise StructuralError(
            f"{path}: header declares {declared_links} links, "
            f"found {len(sources)}"
        )

    network = build_network(
        np.array(sources, dtype=np.int64),
        np.array(targets, dtype=np.int64),
        size,
        base_name=network_base_name(path),
    )

    log.info("Read network size: %d nodes", network.size)
    log.info("Read network links: %d", network.link_count)
    log.info("Read network dangling nodes: %d", network.dangling_count)
    log.info("Read network in %.3fs", time.monotonic() - t0)
    return network


def read_nodes(path: str | Path) -> np.ndarray:
    """Read the distinguished node subset.

    First line is the count nr, then nr non-empty lines with one 0-indexed
    node id each.

    Returns:
        int64 array of node ids in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        StructuralError: On a bad count, unparsable id, count mismatch or
            duplicate ids.
    """
    path = Path(path)
    with open(path) as f:
        lines = [line.strip() for line in f.read().split("\n")]

    if not lines or not lines[0]:
        raise StructuralError(f"{path}: missing node count on first line")
    try:
        count = int(lines[0])
    except ValueError as e:
        raise StructuralError(f"{path}: unparsable node count: {e}") from e

    ids: list[int] = []
    for lineno, line in enumerate(lines[1:], start=2):
        if not line:
            continue
        try:
            ids.append(int(line))
        except ValueError as e:
            raise StructuralError(f"{path}:{lineno}: {e}") from e

    if len(ids) != count:
        raise StructuralError(
            f"{path}: declares {count} nodes, found {len(ids)}"
        )
    nodes = np.array(ids, dtype=np.int64)
    if np.unique(nodes).shape[0] != nodes.shape[0]:
        raise StructuralError(f"{path}: duplicate node ids in subset")

    log.info("Read node subset of %d nodes from %s", count, path)
    return nodes


def read_node_names(path: str | Path) -> list[str]:
    """Read one display name per non-empty line."""
    with open(path) as f:
        return [line.rstrip("\r") for line in f.read().split("\n") if line.strip()]


def validate_subset(network: Network, nodes: np.ndarray) -> None:
    """Check that every subset id is a node of the network.

    Raises:
        DimensionError: If an id lies outside [0, network.size).
    """
    if nodes.shape[0] == 0:
        return
    bad = nodes[(nodes < 0) | (nodes >= network.size)]
    if bad.shape[0] > 0:
        raise DimensionError(
            f"Subset node ids {bad.tolist()} outside network of size "
            f"{network.size}"
        )
