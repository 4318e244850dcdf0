#!/usr/bin/env python3
"""
Configuration Management
========================
Dataclass views over chainkit/configs/app.yaml.

Every field left as None is filled from app.yaml; a value missing from both
the caller and app.yaml is a configuration error.

Usage:
    from chainkit.config import WalkConfig

    cfg = WalkConfig()               # values from app.yaml
    cfg = WalkConfig(max_steps=50)   # override one field
"""

import logging
from dataclasses import dataclass
from typing import Optional

from chainkit.settings import get_setting


def _fill(instance, section: str, fields: tuple):
    cfg = get_setting(section, {}) or {}
    for name in fields:
        if getattr(instance, name) is None:
            setattr(instance, name, cfg.get(name))

    missing = [name for name in fields if getattr(instance, name) is None]
    if missing:
        raise ValueError(f"{section} settings missing in app.yaml: {', '.join(missing)}")


# =============================================================================
# Walking
# =============================================================================

@dataclass
class WalkConfig:
    """Defaults for walks and compositions."""
    max_steps: Optional[int] = None     # Transition budget per walk
    selector: Optional[str] = None      # weighted | uniform | highest | lowest

    def __post_init__(self):
        _fill(self, "walk", ("max_steps", "selector"))
        if self.max_steps < 1:
            raise ValueError("walk.max_steps must be at least 1")


# =============================================================================
# Corpus
# =============================================================================

@dataclass
class CorpusConfig:
    """How corpus files are read."""
    encoding: Optional[str] = None

    def __post_init__(self):
        _fill(self, "corpus", ("encoding",))


# =============================================================================
# Batch generation
# =============================================================================

@dataclass
class BatchConfig:
    """Parallel sentence generation."""
    count: Optional[int] = None         # Sentences per batch
    workers: Optional[int] = None       # Thread pool size

    def __post_init__(self):
        _fill(self, "batch", ("count", "workers"))
        if self.workers < 1:
            raise ValueError("batch.workers must be at least 1")


# =============================================================================
# Logging
# =============================================================================

def configure_logging(verbose: bool = False, quiet: bool = False):
    """Set up root logging from app.yaml. Used by the CLI only."""
    level_name = get_setting("logging.level", "WARNING")
    if verbose:
        level_name = "DEBUG"
    elif quiet:
        level_name = "ERROR"

    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid logging.level in app.yaml: {level_name}")

    logging.basicConfig(
        level=level,
        format=get_setting("logging.format", "%(levelname)s %(name)s: %(message)s"),
    )


__all__ = [
    'WalkConfig',
    'CorpusConfig',
    'BatchConfig',
    'configure_logging',
]
