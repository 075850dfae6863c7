"""Configuration for mac-cleanup."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from .constants import NODE_MODULES_MAX_DEPTH, PYTHON_CACHE_MAX_DEPTH

HOME = str(Path.home())
CONFIG_PATHS = [
    os.path.join(HOME, ".maccleanuprc"),
    os.path.join(HOME, ".config", "mac-cleanup", "config.json"),
]

DEFAULTS: dict[str, Any] = {
    "exclude_categories": [],
    "downloads_days_old": 30,
    "logs_days_old": 7,
    "user_cache_days_old": 1,
    "system_cache_days_old": 7,
    "containers_days_old": 7,
    "node_modules_max_depth": NODE_MODULES_MAX_DEPTH,
    "python_cache_max_depth": PYTHON_CACHE_MAX_DEPTH,
    "extra_search_paths": [],
}

VALID_KEYS = frozenset(DEFAULTS.keys())

# (min, max) accepted for integer settings
INT_RANGES = {
    "downloads_days_old": (0, 3650),
    "logs_days_old": (0, 3650),
    "user_cache_days_old": (0, 3650),
    "system_cache_days_old": (0, 3650),
    "containers_days_old": (0, 3650),
    "node_modules_max_depth": (1, 12),
    "python_cache_max_depth": (1, 12),
}


def config_path() -> str:
    """Preferred config file path."""
    return CONFIG_PATHS[0]


def config_exists() -> bool:
    """True if any known config file exists."""
    for p in CONFIG_PATHS:
        if os.path.isfile(p):
            return True
    return False


def _string_list(v: Any) -> list[str]:
    return [str(x) for x in v if isinstance(x, str)][:200]


def validate(raw: dict[str, Any]) -> dict[str, Any]:
    """Defaults overlaid with the valid entries of raw. Bad values are dropped."""
    out = dict(DEFAULTS)
    for k, v in raw.items():
        if k not in VALID_KEYS:
            continue
        if k in ("exclude_categories", "extra_search_paths") and isinstance(v, list):
            out[k] = _string_list(v)
        elif k in INT_RANGES and isinstance(v, (int, float)) and not isinstance(v, bool):
            val = int(v)
            lo, hi = INT_RANGES[k]
            if lo <= val <= hi:
                out[k] = val
    return out


def load() -> dict[str, Any]:
    """Load config from first existing file. Returns defaults + overrides."""
    for p in CONFIG_PATHS:
        if not os.path.isfile(p):
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError):
            continue
        if not isinstance(raw, dict):
            continue
        return validate(raw)
    return dict(DEFAULTS)


def save(cfg: dict[str, Any], path: str | None = None) -> None:
    """Write config to path (default: config_path()). Creates parent dirs."""
    p = path or config_path()
    dirname = os.path.dirname(p)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    to_write = {k: cfg.get(k, DEFAULTS[k]) for k in DEFAULTS}
    with open(p, "w", encoding="utf-8") as f:
        json.dump(to_write, f, indent=2)


def init_config() -> str:
    """Create default config file. Returns path used."""
    p = config_path()
    save(DEFAULTS, p)
    return p
