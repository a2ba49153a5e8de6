"""Static directed graph in compressed form, with file loaders and caching."""

from reduced_google.graph.cache import (
    load_network,
    load_or_read_network,
    network_cache_key,
    save_network,
)
from reduced_google.graph.loader import (
    build_network,
    network_base_name,
    read_network,
    read_node_names,
    read_nodes,
    validate_subset,
)
from reduced_google.graph.types import Network

__all__ = [
    "Network",
    "build_network",
    "load_network",
    "load_or_read_network",
    "network_base_name",
    "network_cache_key",
    "read_network",
    "read_node_names",
    "read_nodes",
    "save_network",
    "validate_subset",
]
