"""
Configuration Loading Utilities.

Reads YAML configuration manifests from disk into plain dictionaries that
the pydantic configuration models validate.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_config_from_yaml(yaml_path: Path) -> dict[str, Any]:
    """
    Loads a raw configuration dictionary from a YAML file.

    An empty document yields an empty dictionary so that model defaults apply.

    Args:
        yaml_path (Path): Path to the source YAML file.

    Returns:
        dict[str, Any]: The loaded configuration manifest.

    Raises:
        FileNotFoundError: If the specified path does not exist.
        ValueError: If the document is not a mapping.
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"YAML configuration file not found at: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML configuration must be a mapping, got {type(data).__name__}")
    return data
