"""Run configuration system with frozen, hashable, serializable dataclasses."""

from reduced_google.config.experiment import (
    MATRIX_NAMES,
    NetworkConfig,
    OutputConfig,
    RunConfig,
    SolverConfig,
    SubsetConfig,
)
from reduced_google.config.defaults import DEFAULT_CONFIG
from reduced_google.config.hashing import (
    config_hash,
    full_config_hash,
    network_config_hash,
)
from reduced_google.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "MATRIX_NAMES",
    "NetworkConfig",
    "OutputConfig",
    "RunConfig",
    "SolverConfig",
    "SubsetConfig",
    "DEFAULT_CONFIG",
    "config_hash",
    "full_config_hash",
    "network_config_hash",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
]
