"""Containers for the restricted matrices and per-column diagnostics."""

from dataclasses import dataclass, field

import numpy as np

from reduced_google.eigen.types import Eigenpair, STOP_CONVERGED
from reduced_google.errors import DimensionError


@dataclass(frozen=True)
class ColumnResult:
    """One column of every restricted matrix, computed from a unit impulse."""

    index: int  # column index in [0, nr)
    g_rr: np.ndarray  # one-step restricted transition
    g_pr: np.ndarray  # dominant-mode contribution
    g_qr: np.ndarray  # deflated (indirect) contribution
    g_i: np.ndarray  # combined resolvent contribution
    iterations: int
    quality: float  # L1 change of s in the last resolvent step
    stop_reason: str

    @property
    def converged(self) -> bool:
        return self.stop_reason == STOP_CONVERGED


@dataclass
class ReducedMatrices:
    """The five nr x nr restricted matrices, indexed [row, col].

    G_R = G_rr + G_I is the total effective transition between subset nodes.
    """

    nodes: np.ndarray
    G_R: np.ndarray
    G_rr: np.ndarray
    G_pr: np.ndarray
    G_qr: np.ndarray
    G_I: np.ndarray
    eigenpair: Eigenpair | None = None
    columns: list[ColumnResult] = field(default_factory=list)

    @classmethod
    def zeros(cls, nodes: np.ndarray, eigenpair: Eigenpair | None = None) -> "ReducedMatrices":
        nr = nodes.shape[0]
        return cls(
            nodes=nodes,
            G_R=np.zeros((nr, nr)),
            G_rr=np.zeros((nr, nr)),
            G_pr=np.zeros((nr, nr)),
            G_qr=np.zeros((nr, nr)),
            G_I=np.zeros((nr, nr)),
            eigenpair=eigenpair,
        )

    @property
    def size(self) -> int:
        return int(self.nodes.shape[0])

    def as_dict(self) -> dict[str, np.ndarray]:
        """Matrices keyed by their output file prefix."""
        return {
            "GR": self.G_R,
            "Grr": self.G_rr,
            "Gpr": self.G_pr,
            "Gqr": self.G_qr,
            "GI": self.G_I,
        }

    def check_shapes(self) -> None:
        nr = self.size
        for name, matrix in self.as_dict().items():
            if matrix.shape != (nr, nr):
                raise DimensionError(
                    f"Wrong matrix size of {name}: {matrix.shape}, "
                    f"expected ({nr}, {nr})"
                )

    def set_column(self, column: ColumnResult) -> None:
        """Write one column into every matrix; columns never overlap."""
        i = column.index
        self.G_rr[:, i] = column.g_rr
        self.G_pr[:, i] = column.g_pr
        self.G_qr[:, i] = column.g_qr
        self.G_I[:, i] = column.g_i
        self.G_R[:, i] = column.g_rr + column.g_i
