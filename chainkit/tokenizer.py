#!/usr/bin/env python3
"""
Sentence Tokenizer
==================
Splits raw text into (word, separator) units.

A word is a maximal run of word characters. The separator is the maximal
run of whitespace/punctuation that immediately follows it, kept verbatim, so
"high priest" and "high-priest" produce the same two words joined by
different separators.

The first unit of every tokenized sentence is ``Unit(START, prefix)``, where
``prefix`` is whatever precedes the first word. The last word carries the
trailing run as its separator. Concatenating ``word + separator`` over all
units (sentinels render as nothing) reproduces the input exactly.

    >>> tokenize("Nice tea, mate.")
    [Unit(START, ''), Unit('Nice', ' '), Unit('tea', ', '), Unit('mate', '.')]
"""

import string
from enum import Enum
from typing import NamedTuple, Union


# =============================================================================
# Sentinels
# =============================================================================

class Marker(Enum):
    """Sentence boundary sentinels. Never equal to any word string."""
    START = "START"
    END = "END"

    def __repr__(self):
        return self.name


START = Marker.START
END = Marker.END

Token = Union[str, Marker]


def is_sentinel(token) -> bool:
    return isinstance(token, Marker)


# =============================================================================
# Units
# =============================================================================

class Unit(NamedTuple):
    """A token and the separator text that follows it in reading order."""
    word: Token
    separator: str

    def __repr__(self):
        return f"Unit({self.word!r}, {self.separator!r})"


# =============================================================================
# Classification
# =============================================================================

SEPARATOR_PUNCTUATION = frozenset(string.punctuation)


def is_separator_char(char: str) -> bool:
    """True for whitespace and ASCII punctuation; everything else is a word char."""
    return char in SEPARATOR_PUNCTUATION or char.isspace()


def tokenize(text: str) -> list[Unit]:
    """Split text into units. Never fails; any string is accepted."""
    units = []
    word = START
    pos = 0
    length = len(text)

    while True:
        # separator run following the current word
        sep_start = pos
        while pos < length and is_separator_char(text[pos]):
            pos += 1
        units.append(Unit(word, text[sep_start:pos]))

        if pos >= length:
            break

        word_start = pos
        while pos < length and not is_separator_char(text[pos]):
            pos += 1
        word = text[word_start:pos]

    return units


def words_in(text: str) -> list[str]:
    """The words of a text, without separators or sentinels."""
    return [unit.word for unit in tokenize(text) if not is_sentinel(unit.word)]


__all__ = [
    'Marker',
    'START',
    'END',
    'Token',
    'Unit',
    'is_sentinel',
    'is_separator_char',
    'tokenize',
    'words_in',
]
