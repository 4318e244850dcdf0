#!/usr/bin/env python3
"""
Persistence
===========
Save and load trained chains as JSON.

The document stores the learned words (sentinels are implicit at ids 0
and 1) and every edge as [src, dst, separator, weight] in first-observed
order, so a loaded chain answers outgoing/incoming queries identically,
ordering included.
"""

import json
from pathlib import Path
from typing import Union

from .chain import WordChain
from .errors import ChainFormatError


def save_chain(chain: WordChain, filepath: Union[str, Path]):
    """Save trained chain to JSON file"""
    Path(filepath).write_text(json.dumps(chain.to_dict(), indent=2, ensure_ascii=False),
                              encoding='utf-8')


def load_chain(filepath: Union[str, Path], **kwargs) -> WordChain:
    """Load trained chain from JSON file"""
    try:
        data = json.loads(Path(filepath).read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ChainFormatError(f"{filepath} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ChainFormatError(f"{filepath} does not contain a chain object")
    return WordChain.from_dict(data, **kwargs)


__all__ = ['save_chain', 'load_chain']
