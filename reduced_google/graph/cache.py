"""Parsed-network caching keyed by config hash and input file fingerprint.

Parsing a multi-million-edge text file dominates start-up time, so the
parsed edge arrays are stored as an .npz archive next to a metadata.json.
A change in the input file's size or modification time produces a new key.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from reduced_google.config.experiment import RunConfig
from reduced_google.config.hashing import network_config_hash
from reduced_google.graph.loader import build_network, read_network
from reduced_google.graph.types import Network

log = logging.getLogger(__name__)


def network_cache_key(config: RunConfig) -> str:
    """Compute cache key for a network configuration.

    Key = network_config_hash + file size + mtime in nanoseconds. Same
    path and limit on an unchanged file = cache hit.

    Returns:
        Cache key string like "a1b2c3d4e5f6g7h8_1024_1700000000000000000".
    """
    stat = Path(config.network.path).stat()
    return f"{network_config_hash(config)}_{stat.st_size}_{stat.st_mtime_ns}"


def _cache_path(config: RunConfig, cache_dir: Path) -> Path:
    """Compute the directory path for a cached network."""
    return cache_dir / network_cache_key(config)


def save_network(network: Network, config: RunConfig, cache_dir: Path) -> Path:
    """Save a parsed network to the cache.

    Stores:
    - network.npz: edge_source, edge_target, size
    - metadata.json: counts, base name, source path, config hash

    Returns:
        Path to the cache directory for this network.
    """
    cache_path = _cache_path(config, cache_dir)
    cache_path.mkdir(parents=True, exist_ok=True)

    np.savez_compressed(
        cache_path / "network.npz",
        edge_source=network.edge_source,
        edge_target=network.edge_target,
        size=np.int64(network.size),
    )

    metadata = {
        "size": network.size,
        "link_count": network.link_count,
        "dangling_count": network.dangling_count,
        "base_name": network.base_name,
        "source_path": str(config.network.path),
        "limit": config.network.limit,
        "config_hash": network_config_hash(config),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    with open(cache_path / "metadata.json", "w") as f:
        json.dump(metadata, f, indent=2)

    log.info("Network cached at %s", cache_path)
    return cache_path


def load_network(config: RunConfig, cache_dir: Path) -> Network | None:
    """Load a cached network if it exists.

    Returns:
        Network if cache hit, None if cache miss.
    """
    cache_path = _cache_path(config, cache_dir)

    for fname in ("network.npz", "metadata.json"):
        if not (cache_path / fname).exists():
            return None

    with open(cache_path / "metadata.json") as f:
        metadata = json.load(f)

    with np.load(cache_path / "network.npz") as data:
        network = build_network(
            data["edge_source"],
            data["edge_target"],
            int(data["size"]),
            base_name=metadata["base_name"],
        )

    log.info("Network loaded from cache: %s", cache_path)
    return network


def load_or_read_network(config: RunConfig) -> Network:
    """Read the configured network, going through the cache when enabled.

    On cache miss: parses the text file and saves to cache.
    On cache hit: rebuilds the Network from the stored edge arrays.
    """
    if config.network.cache_dir is None:
        return read_network(config.network.path, limit=config.network.limit)

    cache_dir = Path(config.network.cache_dir)
    key = network_cache_key(config)

    cached = load_network(config, cache_dir)
    if cached is not None:
        log.info("Cache hit for %s", key)
        return cached

    log.info("Cache miss for %s, parsing...", key)
    network = read_network(config.network.path, limit=config.network.limit)
    save_network(network, config, cache_dir)
    return network
