"""Heatmaps of the restricted matrices between distinguished nodes."""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from reduced_google.reduced.types import ReducedMatrices
from reduced_google.visualization.style import (
    DIVERGING_CMAP,
    SEQUENTIAL_CMAP,
    apply_style,
    save_figure,
)

log = logging.getLogger(__name__)

MATRIX_TITLES = {
    "GR": "G_R (total restricted transition)",
    "Grr": "G_rr (direct one-step transition)",
    "Gpr": "G_pr (dominant-mode contribution)",
    "Gqr": "G_qr (indirect contribution)",
    "GI": "G_I (combined resolvent contribution)",
}

# Above this many nodes tick labels become unreadable.
MAX_LABELLED_NODES = 40


def plot_reduced_matrix(
    matrix: np.ndarray,
    title: str,
    labels: list[str] | None = None,
    diverging: bool = False,
) -> plt.Figure:
    """Plot one nr x nr matrix as a heatmap, rows = target, cols = source.

    Args:
        matrix: Square matrix indexed [row, col].
        title: Figure title.
        labels: Optional node labels for both axes.
        diverging: Center the colormap on zero (for signed matrices).

    Returns:
        The matplotlib Figure containing the heatmap.
    """
    nr = matrix.shape[0]
    if nr == 0:
        fig, ax = plt.subplots(figsize=(6, 5))
        ax.text(
            0.5, 0.5, "Empty node subset",
            transform=ax.transAxes, ha="center", va="center",
            fontsize=12, color="gray",
        )
        ax.set_title(title)
        return fig

    show_labels = labels is not None and nr <= MAX_LABELLED_NODES
    size = min(14, max(5, nr * 0.35))
    fig, ax = plt.subplots(figsize=(size + 1.5, size))

    if diverging:
        bound = float(np.abs(matrix).max()) or 1.0
        kwargs = {"cmap": DIVERGING_CMAP, "vmin": -bound, "vmax": bound}
    else:
        kwargs = {"cmap": SEQUENTIAL_CMAP}

    sns.heatmap(
        matrix,
        annot=nr <= 10,
        fmt=".2g",
        xticklabels=labels if show_labels else False,
        yticklabels=labels if show_labels else False,
        cbar_kws={"label": "Transition weight"},
        square=True,
        ax=ax,
        **kwargs,
    )
    ax.set_xlabel("Source node")
    ax.set_ylabel("Target node")
    ax.set_title(title)

    fig.tight_layout()
    return fig


def render_reduced(
    reduced: ReducedMatrices,
    output_dir: str | Path,
    stem: str,
    matrices: tuple[str, ...],
    names: list[str] | None = None,
) -> list[Path]:
    """Render the selected matrices to <output_dir>/figures.

    Returns:
        All PNG and SVG paths written.
    """
    apply_style()
    labels = names if names is not None and len(names) >= reduced.size else None
    if labels is None:
        labels = [str(int(node)) for node in reduced.nodes]

    figures_dir = Path(output_dir) / "figures"
    all_matrices = reduced.as_dict()
    written: list[Path] = []
    for key in matrices:
        fig = plot_reduced_matrix(
            all_matrices[key],
            MATRIX_TITLES[key],
            labels=labels[: reduced.size],
            diverging=key in ("Gqr", "GI"),
        )
        written.extend(save_figure(fig, figures_dir, f"{key}_{stem}"))

    log.info("Generated %d figure files in %s", len(written), figures_dir)
    return written
