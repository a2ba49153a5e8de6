"""Text output of the restricted matrices and binary output of the eigenvectors.

Matrix file layout: for each row i, one line per column j with
"row<TAB>col<TAB>value" (optionally followed by the row and column node
names), and a blank line after every row block.
"""

import logging
from pathlib import Path

import numpy as np

from reduced_google.eigen.types import Eigenpair
from reduced_google.reduced.types import ReducedMatrices

log = logging.getLogger(__name__)


def results_stem(network_name: str, nodes_name: str, nr: int) -> str:
    """Shared file-name stem: <graph>_<node file>_<nr>."""
    return f"{network_name}_{nodes_name}_{nr}"


def nodes_file_stem(path: str | Path) -> str:
    return Path(path).stem


def format_entry(i: int, j: int, value: float) -> str:
    return f"{i:5d}\t  {j:5d}\t  {value:24.17g}"


def print_mat(
    matrix: np.ndarray, path: str | Path, names: list[str] | None = None
) -> Path:
    """Write a dense matrix in row-block text format.

    Args:
        matrix: 2D array indexed [row, col].
        path: Destination file; parent directories are created.
        names: Optional node names indexed like the rows/columns. Ignored
            with a warning when shorter than the matrix.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    n_rows, n_cols = matrix.shape
    if names is not None and len(names) < max(n_rows, n_cols):
        log.warning(
            "Only %d node names for a %dx%d matrix; writing without names",
            len(names), n_rows, n_cols,
        )
        names = None

    with open(path, "w") as f:
        for i in range(n_rows):
            lines = []
            for j in range(n_cols):
                line = format_entry(i, j, matrix[i, j])
                if names is not None:
                    line += f"\t{names[i]}\t{names[j]}"
                lines.append(line)
            f.write("\n".join(lines) + "\n\n")
    return path


def read_mat(path: str | Path) -> np.ndarray:
    """Parse a file written by print_mat back into a dense array."""
    entries: list[tuple[int, int, float]] = []
    with open(path) as f:
        for line in f:
            tokens = line.split()
            if not tokens:
                continue
            entries.append((int(tokens[0]), int(tokens[1]), float(tokens[2])))

    if not entries:
        return np.zeros((0, 0))
    n_rows = max(e[0] for e in entries) + 1
    n_cols = max(e[1] for e in entries) + 1
    matrix = np.zeros((n_rows, n_cols))
    for i, j, value in entries:
        matrix[i, j] = value
    return matrix


def write_reduced_matrices(
    reduced: ReducedMatrices,
    results_dir: str | Path,
    stem: str,
    matrices: tuple[str, ...],
    names: list[str] | None = None,
) -> dict[str, Path]:
    """Write the selected matrices as <key>_<stem>.dat files.

    Returns:
        Mapping from matrix key to written path.
    """
    results_dir = Path(results_dir)
    all_matrices = reduced.as_dict()
    written: dict[str, Path] = {}
    for key in matrices:
        path = print_mat(all_matrices[key], results_dir / f"{key}_{stem}.dat", names)
        written[key] = path
        log.info("Wrote %s to %s", key, path)
    return written


def write_vectors(eigenpair: Eigenpair, results_dir: str | Path, stem: str) -> Path:
    """Store psi_left, psi_right and the PageRank vector as vectors_<stem>.npz."""
    results_dir = Path(results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)
    path = results_dir / f"vectors_{stem}.npz"
    np.savez_compressed(
        path,
        psi_left=eigenpair.left,
        psi_right=eigenpair.right,
        pagerank=eigenpair.pagerank,
        dlambda=np.float64(eigenpair.dlambda),
    )
    log.info("Eigenvectors written to %s", path)
    return path
