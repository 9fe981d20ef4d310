"""
Configuration loader — YAML hyper-parameters for the example programs.
"""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml

CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load a YAML config.  Defaults to the packaged ``configs/default.yaml``.

    Raises
    ------
    FileNotFoundError : if ``path`` does not exist.
    """
    path = CONFIG_PATH if path is None else Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(path, "r", encoding="utf-8") as fh:
        cfg = yaml.safe_load(fh)
    return cfg or {}


def merge_configs(base: dict, override: dict) -> dict:
    """Deep-merge *override* into *base* (override wins)."""
    merged = deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = merge_configs(merged[k], v)
        else:
            merged[k] = deepcopy(v)
    return merged
