"""Deterministic config hashing: SHA-256 over canonical JSON, 16 hex chars."""

import hashlib
import json
from dataclasses import asdict
from typing import Any

from reduced_google.config.experiment import RunConfig

HASH_LENGTH = 16


def _digest(payload: dict[str, Any]) -> str:
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("ascii")).hexdigest()[:HASH_LENGTH]


def config_hash(config: Any) -> str:
    """Hash any config dataclass (the full RunConfig or one sub-config)."""
    return _digest(asdict(config))


def network_config_hash(config: RunConfig) -> str:
    """Identity of the parsed network: input path and node-id limit.

    The cache location does not change what gets parsed, so configs that
    differ only in cache_dir share a hash.
    """
    payload = asdict(config.network)
    del payload["cache_dir"]
    return _digest(payload)


def full_config_hash(config: RunConfig) -> str:
    """Hash for full run identity."""
    return config_hash(config)
