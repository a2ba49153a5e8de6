#!/usr/bin/env python3
"""Entry point for computing reduced Google matrices of a node subset.

Chains all stages into a single executable command:
network loading -> node subset -> eigenpair -> restricted matrices ->
matrix files -> summary (-> figures).

Usage:
    python run_reduced.py NETFILE DELTA_ALPHA IPRINT PRINT_NUMBER TEN_NUMBER NODEFILE [NAMESFILE]
    python run_reduced.py net.dat_reduce 0.15 10 0 0 countries.nodes countries.names --workers 8
    python run_reduced.py net.dat_reduce 0.15 10 0 0 countries.nodes --dry-run
"""

import argparse
import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Generator

from reduced_google.config import (
    DEFAULT_CONFIG,
    MATRIX_NAMES,
    NetworkConfig,
    OutputConfig,
    RunConfig,
    SubsetConfig,
    config_to_json,
    full_config_hash,
)

log = logging.getLogger(__name__)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that prints stage banners with elapsed time."""
    print(f"\n=== {name} ===")
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    print(f"... done in {elapsed:.1f}s")
    log.info("Completed: %s in %.1fs", name, elapsed)


def run_pipeline(config: RunConfig) -> Path:
    """Execute the full reduced-matrix computation.

    Args:
        config: Run configuration with input paths filled in.

    Returns:
        Path to the results directory.
    """
    # Lazy imports to keep --dry-run fast
    from reduced_google.deadline import Deadline
    from reduced_google.eigen import compute_eigenpair
    from reduced_google.graph import (
        load_or_read_network,
        read_node_names,
        read_nodes,
        validate_subset,
    )
    from reduced_google.reduced import compute_reduced_matrices
    from reduced_google.results import (
        build_summary,
        nodes_file_stem,
        results_stem,
        write_reduced_matrices,
        write_summary,
        write_vectors,
    )

    pipeline_start = time.monotonic()
    solver = config.solver
    deadline = Deadline(solver.deadline_seconds)
    results_dir = Path(config.output.results_dir)

    # ── Stage 1: Node subset ───────────────────────────────────────
    with stage_timer("Node Subset"):
        nodes = read_nodes(config.subset.nodes_path)
        names = None
        if config.subset.names_path:
            names = read_node_names(config.subset.names_path)
            log.info("Read %d node names", len(names))
        log.info("Subset: %d nodes", nodes.shape[0])

    # ── Stage 2: Network ───────────────────────────────────────────
    with stage_timer("Network Loading"):
        network = load_or_read_network(config)
        validate_subset(network, nodes)
        log.info(
            "Network: n=%d, links=%d, dangling=%d",
            network.size, network.link_count, network.dangling_count,
        )

    # ── Stage 3: Eigenpair ─────────────────────────────────────────
    with stage_timer("Eigenpair"):
        eigenpair = compute_eigenpair(
            network,
            solver.delta_alpha,
            nodes,
            eps=solver.eps,
            check_interval=solver.check_interval,
            stall_threshold=solver.stall_threshold,
            workers=solver.workers or 3,
            deadline=deadline,
        )
        if not eigenpair.converged:
            log.warning("Eigenpair did not fully converge; results are approximate")

    # ── Stage 4: Restricted matrices ───────────────────────────────
    with stage_timer("Restricted Matrices"):
        reduced = compute_reduced_matrices(
            network,
            nodes,
            solver.delta_alpha,
            eigenpair=eigenpair,
            workers=solver.workers,
            eps=solver.eps,
            check_interval=solver.check_interval,
            deadline=deadline,
            log_interval=solver.iprint,
        )
        n_unconverged = sum(1 for c in reduced.columns if not c.converged)
        if n_unconverged:
            log.warning("%d of %d columns did not converge", n_unconverged, reduced.size)

    stem = results_stem(
        network.base_name, nodes_file_stem(config.subset.nodes_path), reduced.size
    )

    # ── Stage 5: Write results ─────────────────────────────────────
    with stage_timer("Write Results"):
        written = write_reduced_matrices(
            reduced, results_dir, stem, config.output.matrices, names
        )
        if config.output.write_vectors:
            write_vectors(eigenpair, results_dir, stem)
        (results_dir / f"config_{stem}.json").write_text(config_to_json(config))

    # ── Stage 6: Figures ───────────────────────────────────────────
    figures: list[Path] = []
    if config.output.figures:
        with stage_timer("Figures"):
            from reduced_google.visualization import render_reduced

            figures = render_reduced(
                reduced, results_dir, stem, config.output.matrices, names
            )

    total_elapsed = time.monotonic() - pipeline_start
    summary = build_summary(config, network, reduced, elapsed_seconds=total_elapsed)
    summary_path = write_summary(summary, results_dir / f"summary_{stem}.json")

    # ── Final Summary ──────────────────────────────────────────────
    print(f"\n{'=' * 60}")
    print(f"Computation complete in {total_elapsed:.1f}s")
    print(f"  Network:    {network.base_name} ({network.size} nodes)")
    print(f"  Subset:     {reduced.size} nodes")
    print(f"  dlambda:    {eigenpair.dlambda:.16g}")
    print(f"  Matrices:   {', '.join(str(p) for p in written.values())}")
    print(f"  Summary:    {summary_path}")
    print(f"  Figures:    {len(figures)} files")
    print(f"{'=' * 60}")

    return results_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute reduced Google matrices for a distinguished node subset"
    )
    parser.add_argument("netfile", help="Graph file (N, M, then 1-indexed 'from to' lines)")
    parser.add_argument("delta_alpha", type=float, help="Damping factor alpha")
    parser.add_argument("iprint", type=int, help="Progress logging interval")
    parser.add_argument("print_number", type=int, help="Legacy parameter (ignored)")
    parser.add_argument("ten_number", type=int, help="Legacy parameter (ignored)")
    parser.add_argument("nodefile", help="Node subset file (count, then 0-indexed ids)")
    parser.add_argument(
        "nodenames", nargs="?", default=None,
        help="Optional node names file, one name per subset node",
    )
    parser.add_argument(
        "--limit", type=int, default=None,
        help="Only keep nodes with 1-indexed id <= LIMIT",
    )
    parser.add_argument(
        "--results-dir", default=DEFAULT_CONFIG.output.results_dir,
        help="Directory for result files",
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Worker threads (default: number of CPUs)",
    )
    parser.add_argument(
        "--deadline", type=float, default=None,
        help="Stop iterating after this many seconds and keep the best iterates",
    )
    parser.add_argument(
        "--cache-dir", default=None,
        help="Cache parsed networks in this directory",
    )
    parser.add_argument(
        "--matrices", nargs="+", choices=MATRIX_NAMES,
        default=list(DEFAULT_CONFIG.output.matrices),
        help="Matrices to write",
    )
    parser.add_argument(
        "--no-vectors", action="store_true",
        help="Do not write the eigenvector archive",
    )
    parser.add_argument(
        "--figures", action="store_true",
        help="Render heatmaps of the written matrices",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Enable DEBUG-level logging",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Show the run plan without computing",
    )
    return parser


def build_config(args: argparse.Namespace) -> RunConfig:
    """Translate parsed CLI arguments into a RunConfig."""
    return replace(
        DEFAULT_CONFIG,
        network=NetworkConfig(
            path=args.netfile, limit=args.limit, cache_dir=args.cache_dir
        ),
        subset=SubsetConfig(nodes_path=args.nodefile, names_path=args.nodenames),
        solver=replace(
            DEFAULT_CONFIG.solver,
            delta_alpha=args.delta_alpha,
            iprint=max(1, args.iprint),
            workers=args.workers,
            deadline_seconds=args.deadline,
        ),
        output=OutputConfig(
            results_dir=args.results_dir,
            matrices=tuple(args.matrices),
            write_vectors=not args.no_vectors,
            figures=args.figures,
        ),
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Check inputs
    inputs = [args.netfile, args.nodefile]
    if args.nodenames:
        inputs.append(args.nodenames)
    for path in inputs:
        if not Path(path).exists():
            print(f"Error: input file not found: {path}", file=sys.stderr)
            sys.exit(1)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    log.debug(
        "Legacy parameters print_number=%d, ten_number=%d ignored",
        args.print_number, args.ten_number,
    )

    print(f"Config hash:  {full_config_hash(config)}")
    print(f"Network:      {Path(args.netfile).resolve()}")
    print(f"Nodes:        {Path(args.nodefile).resolve()}")
    if args.nodenames:
        print(f"Node names:   {Path(args.nodenames).resolve()}")
    print(f"delta_alpha:  {config.solver.delta_alpha}")
    print(f"Workers:      {config.solver.workers or 'auto'}")

    if args.dry_run:
        print("\nRun plan:")
        print(f"  1. Read node subset from {args.nodefile}")
        print(f"  2. Load network{' (limit ' + str(args.limit) + ')' if args.limit else ''}")
        print("  3. Eigenpair: left, right and PageRank power iterations")
        print("  4. Restricted matrices: one resolvent expansion per subset node")
        print(f"  5. Write {', '.join(config.output.matrices)} to {config.output.results_dir}/")
        if config.output.figures:
            print("  6. Render heatmaps")
        print("\n[dry-run] Config built successfully. Exiting.")
        return

    try:
        run_pipeline(config)
    except Exception:
        log.exception("Computation failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
