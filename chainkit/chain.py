#!/usr/bin/env python3
"""
Word Chain
==========
Caller-owned Markov chain over words and the exact separators between them.

Key features:
- Separator-aware transitions ("high priest" and "high-priest" are distinct)
- Forward and backward walks with pluggable selection policies
- Sentence composition around a seed word (walk back to START, forward to END)
- Reproducible generation through an injected random source
- Thread-safe training and parallel batch generation

Usage:
    from chainkit import WordChain

    chain = WordChain()
    chain.learn("The cat sat on the mat.")
    chain.learn("The dog sat by the door.")

    result = chain.walk_forward("dog", rng=42)
    print(chain.render(result))           # "dog sat by the door."

    print(chain.compose("sat", rng=7).text)
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .assembler import render
from .config import BatchConfig, WalkConfig
from .graph import ChainGraph, GraphStats, Transition
from .tokenizer import START, END, Token, Unit, tokenize, words_in
from .walk import Direction, RandomSource, Selector, WalkResult, make_rng, walk

logger = logging.getLogger(__name__)


@dataclass
class Composition:
    """A sentence composed around a seed word."""
    text: str
    seed: Optional[str]
    forward: WalkResult
    backward: Optional[WalkResult] = None

    @property
    def complete(self) -> bool:
        """True when both halves reached their sentence boundary."""
        return self.forward.complete and (self.backward is None or self.backward.complete)


class WordChain:
    """Trains on sentences and generates new ones."""

    def __init__(self,
                 graph: ChainGraph = None,
                 walk_config: WalkConfig = None,
                 batch_config: BatchConfig = None):
        self.graph = graph if graph is not None else ChainGraph()
        self._walk_config = walk_config
        self._batch_config = batch_config

    @property
    def walk_config(self) -> WalkConfig:
        if self._walk_config is None:
            self._walk_config = WalkConfig()
        return self._walk_config

    @property
    def batch_config(self) -> BatchConfig:
        if self._batch_config is None:
            self._batch_config = BatchConfig()
        return self._batch_config

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------

    def learn(self, text: str) -> None:
        """Train on one sentence. Any text is accepted."""
        units = tokenize(text)
        transitions = self.graph.learn(units)
        logger.debug(f"Learned {transitions} transitions from {len(units) - 1} words")

    def learn_many(self, texts: Iterable[str]) -> int:
        """Train on several sentences; returns how many were learned."""
        count = 0
        for text in texts:
            self.learn(text)
            count += 1
        return count

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def outgoing(self, token: Token) -> list[Transition]:
        return self.graph.outgoing(token)

    def incoming(self, token: Token) -> list[Transition]:
        return self.graph.incoming(token)

    def stats(self) -> GraphStats:
        return self.graph.stats()

    def __contains__(self, word) -> bool:
        return word in self.graph

    def __len__(self) -> int:
        return len(self.graph)

    # -------------------------------------------------------------------------
    # Walking
    # -------------------------------------------------------------------------

    def walk(self,
             start: Token,
             direction: Union[Direction, str] = Direction.FORWARD,
             max_steps: int = None,
             rng: RandomSource = None,
             selector: Union[str, Selector] = None) -> WalkResult:
        """Walk from `start`; None arguments fall back to WalkConfig."""
        result = walk(
            self.graph,
            start,
            direction,
            max_steps=max_steps if max_steps is not None else self.walk_config.max_steps,
            rng=rng,
            selector=selector if selector is not None else self.walk_config.selector,
        )
        if not result.complete:
            logger.debug(f"{result.direction.value} walk from {start!r} ended with "
                         f"{result.status.value} after {result.steps} steps")
        return result

    def walk_forward(self, start_word: Token, max_steps: int = None,
                     rng: RandomSource = None, selector=None) -> WalkResult:
        """Walk toward END. Raises UnknownToken for unseen words."""
        return self.walk(start_word, Direction.FORWARD, max_steps, rng, selector)

    def walk_backward(self, start_word: Token, max_steps: int = None,
                      rng: RandomSource = None, selector=None) -> WalkResult:
        """Walk toward START. Raises UnknownToken for unseen words."""
        return self.walk(start_word, Direction.BACKWARD, max_steps, rng, selector)

    @staticmethod
    def render(sequence, direction: Union[Direction, str] = Direction.FORWARD) -> str:
        return render(sequence, direction)

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def random_word(self, rng: RandomSource = None) -> Optional[str]:
        """A learned word chosen uniformly, or None for an untrained chain."""
        words = self.graph.words()
        if not words:
            return None
        return make_rng(rng).choice(words)

    def seed_from_prompt(self, prompt: str, rng: RandomSource = None) -> Optional[str]:
        """Pick one of the prompt's words that the chain knows."""
        known = [word for word in words_in(prompt) if word in self.graph]
        if not known:
            return None
        return make_rng(rng).choice(known)

    def compose(self,
                seed: Optional[str] = None,
                rng: RandomSource = None,
                max_steps: int = None,
                selector: Union[str, Selector] = None) -> Composition:
        """
        Compose a sentence containing `seed`.

        Walks backward from the seed to START and forward from it to END,
        then joins both halves around the seed. Without a seed a learned word
        is picked at random; an untrained chain yields an empty sentence.

        Raises:
            UnknownToken: If `seed` was never learned
        """
        rng = make_rng(rng)

        with self.graph.reading():
            if seed is None:
                seed = self.random_word(rng)

            if seed is None:
                forward = self.walk(START, Direction.FORWARD, max_steps, rng, selector)
                return Composition(text=render(forward), seed=None, forward=forward)

            backward = self.walk(seed, Direction.BACKWARD, max_steps, rng, selector)
            forward = self.walk(seed, Direction.FORWARD, max_steps, rng, selector)

        # the backward half ends with the seed itself; the forward half
        # starts with it again, carrying the separator that follows it
        units: list[Unit] = backward.reading_order[:-1] + forward.units
        return Composition(text=render(units), seed=seed, forward=forward, backward=backward)

    def generate_batch(self,
                       count: int = None,
                       seed: Optional[str] = None,
                       rng: RandomSource = None,
                       workers: int = None,
                       max_steps: int = None,
                       selector: Union[str, Selector] = None) -> list[Composition]:
        """
        Compose several sentences in parallel.

        Each composition gets its own Random derived from `rng`, and results
        come back in submission order, so a seeded batch is reproducible
        regardless of thread scheduling.
        """
        if count is None:
            count = self.batch_config.count
        if workers is None:
            workers = self.batch_config.workers
        if count < 0:
            raise ValueError("count must not be negative")

        master = make_rng(rng)
        task_rngs = [random.Random(master.getrandbits(64)) for _ in range(count)]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self.compose, seed, task_rng, max_steps, selector)
                for task_rng in task_rngs
            ]
            results = [future.result() for future in futures]

        incomplete = sum(1 for r in results if not r.complete)
        if incomplete:
            logger.debug(f"{incomplete}/{count} compositions did not reach a sentence boundary")
        return results

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        return self.graph.to_dict()

    @classmethod
    def from_dict(cls, data: dict, **kwargs) -> 'WordChain':
        return cls(graph=ChainGraph.from_dict(data), **kwargs)


__all__ = ['WordChain', 'Composition', 'START', 'END']
