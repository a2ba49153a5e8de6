"""Result matrix files, eigenvector archives and run summaries."""

from reduced_google.results.schema import (
    build_summary,
    load_summary,
    validate_summary,
    write_summary,
)
from reduced_google.results.writer import (
    nodes_file_stem,
    print_mat,
    read_mat,
    results_stem,
    write_reduced_matrices,
    write_vectors,
)

__all__ = [
    "build_summary",
    "load_summary",
    "nodes_file_stem",
    "print_mat",
    "read_mat",
    "results_stem",
    "validate_summary",
    "write_reduced_matrices",
    "write_summary",
    "write_vectors",
]
