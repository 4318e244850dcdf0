#!/usr/bin/env python3
"""
Chain Graph
===========
Directed, weighted multigraph of word transitions.

Nodes are identified by their token text and stored in an indexed list;
edges refer to nodes by integer id. An edge is keyed by the full
(source, destination, separator) triple, so the same two words joined by
a space and by a hyphen are two independent edges, each with its own
observation count.

Node ids 0 and 1 are always the START and END sentinels.

Usage:
    from chainkit.graph import ChainGraph, START
    from chainkit.tokenizer import tokenize

    graph = ChainGraph()
    graph.learn(tokenize("The cat sat."))
    graph.outgoing(START)   # [Transition(token='The', separator='', weight=1)]
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator, NamedTuple, Optional

from .errors import ChainFormatError, UnknownToken
from .tokenizer import END, START, Marker, Token, Unit, is_sentinel

FORMAT_VERSION = 1

START_ID = 0
END_ID = 1


# =============================================================================
# Locking
# =============================================================================

class ReadWriteLock:
    """
    Many readers or one writer.

    Readers never wait for queued writers, so a thread already holding the
    read side can re-enter it safely.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    def acquire_read(self):
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True

    def release_write(self):
        with self._cond:
            self._writing = False
            self._cond.notify_all()

    @contextmanager
    def read(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


# =============================================================================
# Graph elements
# =============================================================================

@dataclass
class Edge:
    """An observed transition src -> dst joined by `separator`."""
    src: int
    dst: int
    separator: str
    weight: int = 0


class Transition(NamedTuple):
    """Read-only view of an edge from one endpoint's point of view."""
    token: Token
    separator: str
    weight: int


@dataclass(frozen=True)
class GraphStats:
    """Summary counts for a graph."""
    nodes: int
    words: int
    edges: int
    separators: int
    total_weight: int
    sentences: int


# =============================================================================
# Graph
# =============================================================================

class ChainGraph:
    """Weighted transition multigraph anchored by START and END."""

    def __init__(self):
        self._tokens: list[Token] = [START, END]
        self._ids: dict[str, int] = {}
        self._edges: dict[tuple[int, int, str], Edge] = {}
        # node id -> {(neighbor id, separator): Edge}, insertion ordered
        self._out: dict[int, dict[tuple[int, str], Edge]] = {START_ID: {}, END_ID: {}}
        self._in: dict[int, dict[tuple[int, str], Edge]] = {START_ID: {}, END_ID: {}}
        self._sentences = 0
        self._lock = ReadWriteLock()

    # -------------------------------------------------------------------------
    # Node identity
    # -------------------------------------------------------------------------

    def _node_id(self, token: Token) -> Optional[int]:
        if token is START:
            return START_ID
        if token is END:
            return END_ID
        return self._ids.get(token)

    def _require_id(self, token: Token) -> int:
        node_id = self._node_id(token)
        if node_id is None:
            raise UnknownToken(token)
        return node_id

    def _ensure_id(self, token: Token) -> int:
        node_id = self._node_id(token)
        if node_id is None:
            node_id = len(self._tokens)
            self._tokens.append(token)
            self._ids[token] = node_id
            self._out[node_id] = {}
            self._in[node_id] = {}
        return node_id

    def _add_edge(self, src: int, dst: int, separator: str, count: int = 1) -> Edge:
        key = (src, dst, separator)
        edge = self._edges.get(key)
        if edge is None:
            edge = Edge(src, dst, separator)
            self._edges[key] = edge
            self._out[src][(dst, separator)] = edge
            self._in[dst][(src, separator)] = edge
        edge.weight += count
        return edge

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------

    def learn(self, units: Iterable[Unit]) -> int:
        """
        Ingest one tokenized sentence.

        START is prepended when the sequence does not already begin with it,
        END is always appended. Every consecutive pair becomes (or reinforces)
        an edge carrying the separator between them.

        Returns:
            Number of transitions recorded
        """
        units = list(units)
        if units and units[-1].word is END:
            units.pop()
        if not units or units[0].word is not START:
            units.insert(0, Unit(START, ""))

        tokens = [unit.word for unit in units] + [END]
        for token in tokens[1:-1]:
            if is_sentinel(token):
                raise ValueError(f"Sentinel {token!r} inside a sentence")

        with self._lock.write():
            ids = [self._ensure_id(token) for token in tokens]
            for i, unit in enumerate(units):
                self._add_edge(ids[i], ids[i + 1], unit.separator)
            self._sentences += 1

        return len(units)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @contextmanager
    def reading(self):
        """Hold the read side for a consistent view across several queries."""
        with self._lock.read():
            yield self

    def _view(self, adjacency: dict[tuple[int, str], Edge], forward: bool) -> list[Transition]:
        return [
            Transition(self._tokens[edge.dst if forward else edge.src], edge.separator, edge.weight)
            for edge in adjacency.values()
        ]

    def outgoing(self, token: Token) -> list[Transition]:
        """Transitions leaving `token`, for forward walking."""
        with self._lock.read():
            return self._view(self._out[self._require_id(token)], forward=True)

    def incoming(self, token: Token) -> list[Transition]:
        """Transitions arriving at `token`, for backward walking."""
        with self._lock.read():
            return self._view(self._in[self._require_id(token)], forward=False)

    def edges_between(self, src: Token, dst: Token) -> list[Transition]:
        """All edges from `src` to `dst`, one per distinct separator."""
        with self._lock.read():
            src_id = self._require_id(src)
            dst_id = self._require_id(dst)
            return [t for t in self._view(self._out[src_id], forward=True)
                    if self._node_id(t.token) == dst_id]

    def weight(self, src: Token, dst: Token, separator: str) -> int:
        """Observation count of one transition; 0 if never seen."""
        with self._lock.read():
            edge = self._edges.get((self._require_id(src), self._require_id(dst), separator))
            return edge.weight if edge else 0

    def words(self) -> list[str]:
        """Every learned word, in first-seen order."""
        with self._lock.read():
            return list(self._tokens[2:])

    def __contains__(self, token) -> bool:
        return self._node_id(token) is not None

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(list(self._tokens))

    @property
    def is_empty(self) -> bool:
        return self._sentences == 0

    def stats(self) -> GraphStats:
        with self._lock.read():
            return GraphStats(
                nodes=len(self._tokens),
                words=len(self._tokens) - 2,
                edges=len(self._edges),
                separators=len({sep for _, _, sep in self._edges}),
                total_weight=sum(e.weight for e in self._edges.values()),
                sentences=self._sentences,
            )

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Serialize graph to dictionary. Sentinels occupy ids 0 and 1."""
        with self._lock.read():
            return {
                'format_version': FORMAT_VERSION,
                'sentences': self._sentences,
                'words': list(self._tokens[2:]),
                'edges': [
                    [e.src, e.dst, e.separator, e.weight]
                    for e in self._edges.values()
                ],
            }

    @classmethod
    def from_dict(cls, data: dict) -> 'ChainGraph':
        """Deserialize graph from dictionary"""
        version = data.get('format_version')
        if version != FORMAT_VERSION:
            raise ChainFormatError(f"Unsupported chain format version: {version!r}")

        graph = cls()
        try:
            for word in data['words']:
                if not isinstance(word, str) or word in graph._ids:
                    raise ChainFormatError(f"Invalid word entry: {word!r}")
                graph._ensure_id(word)

            node_count = len(graph._tokens)
            for src, dst, separator, weight in data['edges']:
                if not (0 <= src < node_count and 0 <= dst < node_count):
                    raise ChainFormatError(f"Edge references unknown node: {src} -> {dst}")
                if not isinstance(separator, str):
                    raise ChainFormatError(f"Invalid separator: {separator!r}")
                if not isinstance(weight, int) or weight < 1:
                    raise ChainFormatError(f"Invalid edge weight: {weight!r}")
                if dst == START_ID or src == END_ID:
                    raise ChainFormatError(f"Edge crosses a sentence boundary: {src} -> {dst}")
                if (src, dst, separator) in graph._edges:
                    raise ChainFormatError(f"Duplicate edge: {src} -> {dst} {separator!r}")
                graph._add_edge(src, dst, separator, weight)

            graph._sentences = int(data.get('sentences', 0))
        except ChainFormatError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ChainFormatError(f"Malformed chain data: {e}") from e

        return graph


__all__ = [
    'ChainGraph',
    'Edge',
    'Transition',
    'GraphStats',
    'ReadWriteLock',
    'Marker',
    'START',
    'END',
    'FORMAT_VERSION',
]
