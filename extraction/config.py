"""
YAML configuration for object extraction runs.
"""
import copy
import os
from typing import Optional

import yaml

DEFAULTS = {
    "data": {
        "images_dir": "images",
        "annotation": "annotations.json",
    },
    "output": {
        "dir": "masks",
    },
    "workers": {
        "count": 8,
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    result = base.copy()
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def load_config(config_path: Optional[str] = None) -> dict:
    """Load a YAML config merged over DEFAULTS. No path means defaults only."""
    if config_path is None:
        return copy.deepcopy(DEFAULTS)
    with open(config_path) as f:
        config = yaml.safe_load(f) or {}
    return _deep_merge(copy.deepcopy(DEFAULTS), config)


def resolve_worker_count(value) -> int:
    """Accept a positive int or "auto" (one worker per CPU)."""
    if isinstance(value, str) and value.strip().lower() == "auto":
        return os.cpu_count() or 1
    count = int(value)
    if count < 1:
        raise ValueError(f"Worker count must be >= 1, got {value!r}")
    return count
