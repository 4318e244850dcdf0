#!/usr/bin/env python3
"""Package wrapper around the top-level settings loader."""

from settings import (
    load_app_config,
    get_setting,
    resolve_path,
    CONFIG_ENV_VAR,
)

__all__ = [
    "load_app_config",
    "get_setting",
    "resolve_path",
    "CONFIG_ENV_VAR",
]
