#!/usr/bin/env python3
"""
chainkit - Separator-Aware Word Markov Chains
=============================================

Builds a weighted transition graph from sentences, keeping the exact
whitespace/punctuation between adjacent words as part of each transition,
and generates new sentences by walking it forward or backward.

Quick Start
-----------
    from chainkit import WordChain, START

    chain = WordChain()
    chain.learn("The high priest spoke.")
    chain.learn("The high-priest listened.")

    # Walk from the sentence start to its end
    result = chain.walk_forward(START, rng=1)
    print(chain.render(result))

    # Compose a sentence around a word
    print(chain.compose("priest").text)

Modules
-------
    chainkit.tokenizer   - (word, separator) tokenization
    chainkit.graph       - Weighted transition multigraph
    chainkit.walk        - Forward/backward walks and selectors
    chainkit.assembler   - Rendering unit sequences back to text
    chainkit.chain       - WordChain facade
    chainkit.corpus      - Learning from text files
    chainkit.persistence - JSON save/load

CLI Usage
---------
    python -m chainkit train corpus.txt -o model.json
    python -m chainkit generate -m model.json -n 5
    python -m chainkit stats -m model.json
"""

__version__ = "0.1.0"
__author__ = "chainkit"

import sys
from pathlib import Path

# Ensure parent directory is in path for imports
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

# =============================================================================
# Core Imports
# =============================================================================

from .errors import (
    ChainError,
    UnknownToken,
    WalkError,
    WalkTimeout,
    DeadEnd,
    ChainFormatError,
)
from .tokenizer import (
    Marker,
    START,
    END,
    Unit,
    tokenize,
    words_in,
    is_separator_char,
)
from .graph import (
    ChainGraph,
    Transition,
    GraphStats,
)
from .walk import (
    Direction,
    WalkStatus,
    WalkResult,
    Selector,
    WeightedRandomSelector,
    UniformRandomSelector,
    HighestWeightSelector,
    LowestWeightSelector,
    get_selector,
    walk,
)
from .assembler import render
from .chain import WordChain, Composition
from .config import WalkConfig, CorpusConfig, BatchConfig
from .corpus import iter_sentences, learn_file, learn_files
from .persistence import save_chain, load_chain


# =============================================================================
# Convenience Functions
# =============================================================================

def train(sentences, **kwargs) -> WordChain:
    """Build a new WordChain from an iterable of sentences."""
    chain = WordChain(**kwargs)
    chain.learn_many(sentences)
    return chain


# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    '__version__',

    # Main class
    'WordChain',
    'Composition',
    'train',

    # Tokens
    'Marker',
    'START',
    'END',
    'Unit',
    'tokenize',
    'words_in',
    'is_separator_char',

    # Graph
    'ChainGraph',
    'Transition',
    'GraphStats',

    # Walking
    'Direction',
    'WalkStatus',
    'WalkResult',
    'Selector',
    'WeightedRandomSelector',
    'UniformRandomSelector',
    'HighestWeightSelector',
    'LowestWeightSelector',
    'get_selector',
    'walk',
    'render',

    # Config
    'WalkConfig',
    'CorpusConfig',
    'BatchConfig',

    # Corpus & persistence
    'iter_sentences',
    'learn_file',
    'learn_files',
    'save_chain',
    'load_chain',

    # Errors
    'ChainError',
    'UnknownToken',
    'WalkError',
    'WalkTimeout',
    'DeadEnd',
    'ChainFormatError',
]
