"""Run summary construction, validation and writing.

Uses a Python validation function (not jsonschema) to check required fields
and per-column array consistency before writing summary JSON files.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from reduced_google.config.experiment import RunConfig
from reduced_google.config.hashing import full_config_hash
from reduced_google.config.serialization import config_to_dict
from reduced_google.eigen.types import PowerIterationResult
from reduced_google.graph.types import Network
from reduced_google.reduced.types import ReducedMatrices

SCHEMA_VERSION = "1.0"

REQUIRED_TOP_FIELDS = {
    "schema_version",
    "timestamp",
    "config_hash",
    "config",
    "network",
    "eigen",
    "columns",
}

REQUIRED_NETWORK_FIELDS = {"base_name", "size", "link_count", "dangling_count"}
REQUIRED_COLUMN_FIELDS = {"index", "node", "iterations", "quality", "stop_reason"}


def _power_summary(result: PowerIterationResult) -> dict[str, Any]:
    return {
        "dlambda": result.dlambda,
        "iterations": result.iterations,
        "quality": result.quality,
        "quality_rel": result.quality_rel,
        "stop_reason": result.stop_reason,
    }


def build_summary(
    config: RunConfig,
    network: Network,
    reduced: ReducedMatrices,
    elapsed_seconds: float | None = None,
) -> dict[str, Any]:
    """Assemble the summary dict for one run."""
    eigen: dict[str, Any] = {}
    if reduced.eigenpair is not None:
        pair = reduced.eigenpair
        eigen = {
            "dlambda": pair.dlambda,
            "dlambda_left": pair.dlambda_left,
            "biorthogonality": pair.biorthogonality,
            "right": _power_summary(pair.right_result),
            "left": _power_summary(pair.left_result),
            "pagerank": _power_summary(pair.pagerank_result),
        }

    return {
        "schema_version": SCHEMA_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "description": config.description,
        "config_hash": full_config_hash(config),
        "config": config_to_dict(config),
        "network": {
            "base_name": network.base_name,
            "size": network.size,
            "link_count": network.link_count,
            "dangling_count": network.dangling_count,
        },
        "nodes": reduced.nodes.tolist(),
        "eigen": eigen,
        "columns": [
            {
                "index": c.index,
                "node": int(reduced.nodes[c.index]),
                "iterations": c.iterations,
                "quality": c.quality,
                "stop_reason": c.stop_reason,
            }
            for c in reduced.columns
        ],
        "elapsed_seconds": elapsed_seconds,
    }


def validate_summary(summary: dict[str, Any]) -> list[str]:
    """Validate a summary dict against the schema.

    Returns a list of error strings. An empty list means the summary is valid.
    """
    errors: list[str] = []

    missing = REQUIRED_TOP_FIELDS - set(summary.keys())
    if missing:
        errors.append(f"Missing required top-level fields: {sorted(missing)}")

    if "schema_version" in summary and not isinstance(summary["schema_version"], str):
        errors.append("schema_version must be a string")

    if "config" in summary and not isinstance(summary["config"], dict):
        errors.append("config must be a dict")

    if "timestamp" in summary:
        ts = summary["timestamp"]
        if not isinstance(ts, str):
            errors.append("timestamp must be a string")
        else:
            try:
                datetime.fromisoformat(ts)
            except ValueError:
                errors.append("timestamp must be in ISO 8601 format")

    network = summary.get("network")
    if network is not None:
        if not isinstance(network, dict):
            errors.append("network must be a dict")
        else:
            missing_net = REQUIRED_NETWORK_FIELDS - set(network.keys())
            if missing_net:
                errors.append(f"network missing fields: {sorted(missing_net)}")

    columns = summary.get("columns")
    if columns is not None:
        if not isinstance(columns, list):
            errors.append("columns must be a list")
        else:
            for k, column in enumerate(columns):
                missing_col = REQUIRED_COLUMN_FIELDS - set(column.keys())
                if missing_col:
                    errors.append(f"columns[{k}] missing fields: {sorted(missing_col)}")
            nodes = summary.get("nodes")
            if isinstance(nodes, list) and len(nodes) != len(columns):
                errors.append(
                    f"columns has {len(columns)} entries, nodes has {len(nodes)}"
                )

    return errors


def write_summary(summary: dict[str, Any], path: str | Path) -> Path:
    """Validate and write a summary as indented JSON.

    Raises:
        ValueError: If the summary fails validation.
    """
    errors = validate_summary(summary)
    if errors:
        raise ValueError("Invalid summary: " + "; ".join(errors))
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(summary, f, indent=2)
    return path


def load_summary(path: str | Path) -> dict[str, Any]:
    with open(path) as f:
        return json.load(f)
