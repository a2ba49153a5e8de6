"""Static figures of the restricted matrices."""

from reduced_google.visualization.heatmap import plot_reduced_matrix, render_reduced
from reduced_google.visualization.style import apply_style, save_figure

__all__ = [
    "apply_style",
    "plot_reduced_matrix",
    "render_reduced",
    "save_figure",
]
