"""Run configuration dataclasses, all frozen and slotted for immutability."""

from dataclasses import dataclass, field

# Output matrix keys, in the order they are written.
MATRIX_NAMES: tuple[str, ...] = ("GR", "Grr", "Gpr", "Gqr", "GI")


@dataclass(frozen=True, slots=True)
class NetworkConfig:
    """Where the graph comes from and how it is loaded."""

    path: str = ""  # graph text file
    limit: int | None = None  # node-id ceiling for limited loading
    cache_dir: str | None = None  # parsed-network cache, disabled when None


@dataclass(frozen=True, slots=True)
class SubsetConfig:
    """Distinguished node subset and optional display names."""

    nodes_path: str = ""
    names_path: str | None = None


@dataclass(frozen=True, slots=True)
class SolverConfig:
    """Numerical parameters of the eigensolver and resolvent loop."""

    delta_alpha: float = 0.15  # damping / teleport probability
    eps: float = 1e-13  # relative convergence threshold
    check_interval: int = 10  # eigensolver convergence check cadence
    stall_threshold: float = 1e-3  # below this, detect stalled refinement
    iprint: int = 10  # logging cadence
    workers: int | None = None  # None = os.cpu_count()
    deadline_seconds: float | None = None


@dataclass(frozen=True, slots=True)
class OutputConfig:
    """What gets written and where."""

    results_dir: str = "Results"
    matrices: tuple[str, ...] = MATRIX_NAMES
    write_vectors: bool = True
    figures: bool = False


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Top-level run configuration composing all sub-configs.

    All fields are frozen and typed. Cross-parameter validation runs
    in __post_init__ to reject invalid configurations early.
    """

    network: NetworkConfig = field(default_factory=NetworkConfig)
    subset: SubsetConfig = field(default_factory=SubsetConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    description: str = ""

    def __post_init__(self) -> None:
        solver = self.solver
        if not 0.0 <= solver.delta_alpha <= 1.0:
            raise ValueError(
                f"delta_alpha must be in [0, 1], got {solver.delta_alpha}"
            )
        if solver.eps <= 0:
            raise ValueError(f"eps must be positive, got {solver.eps}")
        if solver.check_interval < 1:
            raise ValueError(
                f"check_interval must be >= 1, got {solver.check_interval}"
            )
        if solver.iprint < 1:
            raise ValueError(f"iprint must be >= 1, got {solver.iprint}")
        if solver.workers is not None and solver.workers < 1:
            raise ValueError(f"workers must be >= 1, got {solver.workers}")
        if solver.deadline_seconds is not None and solver.deadline_seconds <= 0:
            raise ValueError(
                f"deadline_seconds must be positive, got {solver.deadline_seconds}"
            )
        if self.network.limit is not None and self.network.limit < 1:
            raise ValueError(
                f"limit must be a positive node count, got {self.network.limit}"
            )
        unknown = set(self.output.matrices) - set(MATRIX_NAMES)
        if unknown:
            raise ValueError(
                f"Unknown matrix names {sorted(unknown)}; "
                f"expected a subset of {list(MATRIX_NAMES)}"
            )
