#!/usr/bin/env python3
"""
Walk Engine
===========
Samples a path through a ChainGraph, forward toward END or backward
toward START.

At each node the engine lists the transitions in the requested direction,
asks a selector to pick one, records it and moves on. A walk ends in one of
three ways:

- COMPLETE: the sentinel for the direction was reached
- DEAD_END: a node had no transitions in that direction
- TIMEOUT:  `max_steps` transitions were taken without reaching a sentinel

All three return the units collected so far. Units use the same shape as
the tokenizer: each separator is attached to the word it follows in
forward reading order, whichever direction the walk went.

Selectors
---------
- weighted: P(transition) = weight / total weight at the node (default)
- uniform:  every transition equally likely
- highest:  always the most observed transition
- lowest:   always the least observed transition
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .errors import DeadEnd, WalkTimeout
from .graph import ChainGraph, Transition
from .tokenizer import END, START, Token, Unit


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def target(self) -> Token:
        """Sentinel that completes a walk in this direction."""
        return END if self is Direction.FORWARD else START


class WalkStatus(Enum):
    COMPLETE = "complete"
    DEAD_END = "dead_end"
    TIMEOUT = "timeout"


@dataclass
class WalkResult:
    """Outcome of a single walk."""
    start: Token
    direction: Direction
    status: WalkStatus
    steps: int = 0
    units: list[Unit] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.status is WalkStatus.COMPLETE

    @property
    def reading_order(self) -> list[Unit]:
        """Units as they read left to right."""
        if self.direction is Direction.BACKWARD:
            return list(reversed(self.units))
        return list(self.units)

    def raise_for_status(self) -> 'WalkResult':
        """Raise DeadEnd or WalkTimeout for incomplete walks; return self otherwise."""
        if self.status is WalkStatus.TIMEOUT:
            raise WalkTimeout(
                f"Walk from {self.start!r} took {self.steps} steps without reaching "
                f"{self.direction.target!r}", self)
        if self.status is WalkStatus.DEAD_END:
            raise DeadEnd(
                f"Walk from {self.start!r} stopped at a dead end after {self.steps} steps", self)
        return self


# =============================================================================
# Selectors
# =============================================================================

RandomSource = Union[random.Random, int, None]


def make_rng(rng: RandomSource = None) -> random.Random:
    """Coerce a seed, an existing Random, or None into a Random instance."""
    if isinstance(rng, random.Random):
        return rng
    return random.Random(rng)


class Selector:
    """Chooses the next transition from a non-empty candidate list."""
    name = "base"

    def choose(self, candidates: list[Transition], rng: random.Random) -> Transition:
        raise NotImplementedError


class WeightedRandomSelector(Selector):
    name = "weighted"

    def choose(self, candidates, rng):
        return rng.choices(candidates, weights=[c.weight for c in candidates])[0]


class UniformRandomSelector(Selector):
    name = "uniform"

    def choose(self, candidates, rng):
        return rng.choice(candidates)


class HighestWeightSelector(Selector):
    name = "highest"

    def choose(self, candidates, rng):
        # max() keeps the first of equal weights
        return max(candidates, key=lambda c: c.weight)


class LowestWeightSelector(Selector):
    name = "lowest"

    def choose(self, candidates, rng):
        return min(candidates, key=lambda c: c.weight)


SELECTORS = {
    cls.name: cls
    for cls in (WeightedRandomSelector, UniformRandomSelector,
                HighestWeightSelector, LowestWeightSelector)
}


def get_selector(selector: Union[str, Selector, None] = None) -> Selector:
    """Resolve a selector name (or instance) to a Selector."""
    if selector is None:
        return WeightedRandomSelector()
    if isinstance(selector, Selector):
        return selector
    cls = SELECTORS.get(selector)
    if cls is None:
        available = ', '.join(sorted(SELECTORS))
        raise ValueError(f"Unknown selector '{selector}'. Available selectors: {available}")
    return cls()


# =============================================================================
# Walking
# =============================================================================

def walk(graph: ChainGraph,
         start: Token,
         direction: Direction = Direction.FORWARD,
         max_steps: int = 450,
         rng: RandomSource = None,
         selector: Union[str, Selector, None] = None) -> WalkResult:
    """
    Walk the graph from `start`.

    Args:
        graph: Graph to walk; held under its read lock for the whole walk
        start: Starting token (word, START or END)
        direction: FORWARD follows outgoing edges, BACKWARD incoming ones
        max_steps: Maximum number of transitions
        rng: Random source or seed, for reproducible walks
        selector: Selection policy name or instance

    Returns:
        WalkResult with the collected units and how the walk ended

    Raises:
        UnknownToken: If `start` is not in the graph
        ValueError: If max_steps < 1
    """
    if max_steps < 1:
        raise ValueError("max_steps must be at least 1")

    direction = Direction(direction)
    rng = make_rng(rng)
    selector = get_selector(selector)
    forward = direction is Direction.FORWARD
    target = direction.target

    with graph.reading():
        # validates `start` before anything is produced
        candidates = graph.outgoing(start) if forward else graph.incoming(start)

        units = [] if forward else [Unit(start, "")]
        current = start
        steps = 0
        status = WalkStatus.COMPLETE

        while current is not target:
            if not candidates:
                status = WalkStatus.DEAD_END
                break
            if steps >= max_steps:
                status = WalkStatus.TIMEOUT
                break

            choice = selector.choose(candidates, rng)
            if forward:
                units.append(Unit(current, choice.separator))
            else:
                units.append(Unit(choice.token, choice.separator))
            current = choice.token
            steps += 1

            if current is not target:
                candidates = graph.outgoing(current) if forward else graph.incoming(current)

        if forward:
            units.append(Unit(current, ""))

    return WalkResult(start=start, direction=direction, status=status,
                      steps=steps, units=units)


__all__ = [
    'Direction',
    'WalkStatus',
    'WalkResult',
    'Selector',
    'WeightedRandomSelector',
    'UniformRandomSelector',
    'HighestWeightSelector',
    'LowestWeightSelector',
    'SELECTORS',
    'get_selector',
    'make_rng',
    'walk',
]
