#!/usr/bin/env python3
"""
Chain Errors
============
Exception hierarchy for chainkit.

Walk conditions (dead end, timeout) are normally reported through
``WalkResult.status``; the exceptions below exist for callers that prefer
to have them raised via ``WalkResult.raise_for_status()``.
"""


class ChainError(Exception):
    """Base class for all chainkit errors."""


class UnknownToken(ChainError, KeyError):
    """A query or walk referenced a word the chain has never learned."""

    def __init__(self, token):
        self.token = token
        super().__init__(token)

    def __str__(self):
        return f"Unknown token: {self.token!r}"


class WalkError(ChainError):
    """A walk stopped before reaching a sentence boundary."""

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class WalkTimeout(WalkError):
    """The step budget ran out before a sentinel was reached."""


class DeadEnd(WalkError):
    """The walk reached a node with no transitions in its direction."""


class ChainFormatError(ChainError, ValueError):
    """Serialized chain data could not be understood."""
