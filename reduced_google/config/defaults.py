"""Default configuration, the single source of truth for default run parameters."""

from reduced_google.config.experiment import RunConfig

# delta_alpha=0.15, eps=1e-13, check_interval=10, all five matrices written
# to Results/. Input paths are filled in by the CLI.
DEFAULT_CONFIG = RunConfig()
