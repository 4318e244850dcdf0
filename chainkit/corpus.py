#!/usr/bin/env python3
"""
Corpus Ingestion
================
Feeds text files into a WordChain, one sentence per line.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Union

from .chain import WordChain
from .config import CorpusConfig

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def iter_sentences(path: PathLike, encoding: str = None) -> Iterator[str]:
    """Yield each stripped, non-blank line of a text file."""
    if encoding is None:
        encoding = CorpusConfig().encoding

    with open(path, encoding=encoding) as f:
        for line in f:
            line = line.strip()
            if line:
                yield line


def learn_file(chain: WordChain, path: PathLike, encoding: str = None) -> int:
    """Learn every line of one file; returns the number of sentences."""
    count = chain.learn_many(iter_sentences(path, encoding))
    logger.debug(f"Learned {count} sentences from {path}")
    return count


def learn_files(chain: WordChain, paths: Iterable[PathLike],
                encoding: str = None) -> list[Path]:
    """
    Learn several files, skipping the ones that cannot be read.

    Returns:
        Paths that failed to load
    """
    failed = []
    for path in paths:
        try:
            learn_file(chain, path, encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error reading corpus file {path}: {e}")
            failed.append(Path(path))
    return failed


__all__ = ['iter_sentences', 'learn_file', 'learn_files']
