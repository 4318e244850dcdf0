#!/usr/bin/env python3
"""
Assembler
=========
Turns unit sequences back into text; the inverse of the tokenizer.

Forward sequences are already in reading order. Backward walks collect
units from the end of the sentence toward its start, so they are reversed
before concatenation. Each unit's separator belongs after its word in
reading order either way, which keeps punctuation where it was learned.
"""

from typing import Iterable, Union

from .tokenizer import Token, Unit, is_sentinel
from .walk import Direction, WalkResult


def token_text(token: Token) -> str:
    """Visible text of a token; sentinels have none."""
    return "" if is_sentinel(token) else token


def render(sequence: Union[WalkResult, Iterable[Unit]],
           direction: Union[Direction, str] = Direction.FORWARD) -> str:
    """
    Reassemble a unit sequence into text.

    Args:
        sequence: A WalkResult (its own direction is used) or an iterable of
            (word, separator) units
        direction: Order the units were collected in

    Returns:
        The reconstructed text
    """
    if isinstance(sequence, WalkResult):
        units = sequence.reading_order
    else:
        units = [Unit(*unit) for unit in sequence]
        if Direction(direction) is Direction.BACKWARD:
            units.reverse()

    return "".join(token_text(word) + separator for word, separator in units)


__all__ = ['render', 'token_text']
