#!/usr/bin/env python3
"""
Settings loader for chainkit.

Packaged defaults live in chainkit/configs/app.yaml. A YAML file named by
$CHAINKIT_CONFIG is merged over them, so it only needs the keys it changes.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any
import os

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "chainkit" / "configs" / "app.yaml"
CONFIG_ENV_VAR = "CHAINKIT_CONFIG"


def resolve_path(value: str, base: Path | None = None) -> Path:
    """Resolve a path string relative to the current directory (unless absolute)."""
    if value is None:
        raise ValueError("path value is required")
    path = Path(os.path.expanduser(str(value)))
    if not path.is_absolute():
        path = ((base or Path.cwd()) / path).resolve()
    return path


def config_paths() -> list[Path]:
    """Config files in merge order: defaults first, then the $CHAINKIT_CONFIG overlay."""
    paths = [DEFAULT_CONFIG_PATH]
    overlay = os.environ.get(CONFIG_ENV_VAR)
    if overlay:
        paths.append(resolve_path(overlay))
    return paths


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Missing config: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping: {path}")
    return data


def _merge(base: dict, overlay: dict) -> dict:
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    data: dict = {}
    for path in config_paths():
        data = _merge(data, _read_yaml(path))
    return data


def get_setting(path: str, default: Any = None) -> Any:
    """Get nested setting by dotted path."""
    current: Any = load_app_config()
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


__all__ = [
    "load_app_config",
    "config_paths",
    "get_setting",
    "resolve_path",
    "DEFAULT_CONFIG_PATH",
    "CONFIG_ENV_VAR",
]
