"""Figure style for the reduced-matrix heatmaps, plus dual PNG/SVG saving."""

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for headless rendering

import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path

# Transition weights are non-negative; the Q-projected parts carry a sign.
SEQUENTIAL_CMAP = "viridis"
DIVERGING_CMAP = "RdBu_r"

FIGURE_FORMATS = ("png", "svg")


def apply_style() -> None:
    """Whitegrid theme with print resolution and editable SVG text. Idempotent."""
    sns.set_theme(style="whitegrid")
    plt.rcParams.update({
        "savefig.dpi": 300,
        "axes.titlesize": 12,
        "svg.fonttype": "none",
    })


def save_figure(fig: plt.Figure, output_dir: Path, name: str) -> tuple[Path, Path]:
    """Write fig as <name>.png and <name>.svg under output_dir, then close it.

    Returns:
        Tuple of (png_path, svg_path).
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    png_path, svg_path = (output_dir / f"{name}.{ext}" for ext in FIGURE_FORMATS)
    for path in (png_path, svg_path):
        fig.savefig(path, bbox_inches="tight")
    plt.close(fig)
    return png_path, svg_path
