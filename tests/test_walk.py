"""
Tests for the Walk Engine
=========================
Tests for forward/backward walks, termination and selectors in
chainkit/walk.py.
"""

import pytest
import random
import sys
from collections import Counter
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chainkit.assembler import render
from chainkit.errors import DeadEnd, UnknownToken, WalkTimeout
from chainkit.graph import ChainGraph, Transition
from chainkit.tokenizer import START, END, Unit, tokenize
from chainkit.walk import (
    Direction, WalkStatus, WalkResult,
    WeightedRandomSelector, UniformRandomSelector,
    HighestWeightSelector, LowestWeightSelector,
    get_selector, make_rng, walk,
)


def build(*sentences) -> ChainGraph:
    graph = ChainGraph()
    for sentence in sentences:
        graph.learn(tokenize(sentence))
    return graph


@pytest.fixture
def cat_graph():
    return build("The cat sat.")


@pytest.fixture
def cycle_graph():
    """A graph whose 'round' node only loops back to itself."""
    graph = ChainGraph()
    graph.learn([Unit(START, ""), Unit("go", " ")] + [Unit("round", " ")] * 3 + [Unit("done", "")])
    # Separate cycle with no route to END
    graph._add_edge(graph._ensure_id("spin"), graph._ensure_id("spin"), " ")
    return graph


class TestForward:
    """Tests for forward walks."""

    def test_reproduces_single_sentence(self, cat_graph):
        result = walk(cat_graph, START, Direction.FORWARD, rng=1)
        assert result.status is WalkStatus.COMPLETE
        assert result.steps == 4
        assert render(result) == "The cat sat."

    def test_units_shape(self, cat_graph):
        result = walk(cat_graph, START, Direction.FORWARD, rng=1)
        assert result.units == [
            Unit(START, ""),
            Unit("The", " "),
            Unit("cat", " "),
            Unit("sat", "."),
            Unit(END, ""),
        ]

    def test_from_middle_word(self, cat_graph):
        result = walk(cat_graph, "cat", Direction.FORWARD, rng=1)
        assert result.complete
        assert render(result) == "cat sat."

    def test_start_at_end_is_complete(self, cat_graph):
        result = walk(cat_graph, END, Direction.FORWARD)
        assert result.complete
        assert result.steps == 0
        assert render(result) == ""


class TestBackward:
    """Tests for backward walks."""

    def test_reproduces_single_sentence(self, cat_graph):
        result = walk(cat_graph, END, Direction.BACKWARD, rng=1)
        assert result.status is WalkStatus.COMPLETE
        assert render(result) == "The cat sat."

    def test_units_in_traversal_order(self, cat_graph):
        result = walk(cat_graph, END, Direction.BACKWARD, rng=1)
        assert result.units == [
            Unit(END, ""),
            Unit("sat", "."),
            Unit("cat", " "),
            Unit("The", " "),
            Unit(START, ""),
        ]

    def test_punctuation_stays_in_place(self):
        """Test separators land after the word they followed when learned."""
        graph = build("\"Well,\" said Anne - quietly.")
        result = walk(graph, "quietly", Direction.BACKWARD, rng=3)
        assert result.complete
        assert render(result) == "\"Well,\" said Anne - quietly"

    def test_from_middle_word(self, cat_graph):
        result = walk(cat_graph, "cat", Direction.BACKWARD, rng=1)
        assert render(result) == "The cat"

    def test_start_at_start_is_complete(self, cat_graph):
        result = walk(cat_graph, START, Direction.BACKWARD)
        assert result.complete
        assert result.steps == 0


class TestTermination:
    """Tests for step budgets, dead ends and unknown starts."""

    def test_timeout_on_cycle(self, cycle_graph):
        result = walk(cycle_graph, "spin", Direction.FORWARD, max_steps=10, rng=0)
        assert result.status is WalkStatus.TIMEOUT
        assert result.steps == 10
        assert len(result.units) == 11
        assert render(result) == "spin " * 10 + "spin"

    def test_timeout_raises_on_request(self, cycle_graph):
        result = walk(cycle_graph, "spin", Direction.FORWARD, max_steps=5)
        with pytest.raises(WalkTimeout) as exc:
            result.raise_for_status()
        assert exc.value.result is result

    def test_timeout_backward(self, cycle_graph):
        result = walk(cycle_graph, "spin", Direction.BACKWARD, max_steps=3)
        assert result.status is WalkStatus.TIMEOUT
        assert result.steps == 3

    def test_dead_end(self):
        graph = build("a b")
        graph._ensure_id("orphan")
        result = walk(graph, "orphan", Direction.FORWARD)
        assert result.status is WalkStatus.DEAD_END
        assert result.units == [Unit("orphan", "")]
        with pytest.raises(DeadEnd):
            result.raise_for_status()

    def test_dead_end_after_steps(self):
        graph = ChainGraph()
        a, b = graph._ensure_id("a"), graph._ensure_id("b")
        graph._add_edge(a, b, "+")
        result = walk(graph, "a", Direction.FORWARD)
        assert result.status is WalkStatus.DEAD_END
        assert result.steps == 1
        assert render(result) == "a+b"

    def test_complete_does_not_raise(self, cat_graph):
        result = walk(cat_graph, START)
        assert result.raise_for_status() is result

    def test_unknown_start(self, cat_graph):
        with pytest.raises(UnknownToken):
            walk(cat_graph, "nonexistent-word", Direction.FORWARD)

    def test_invalid_budget(self, cat_graph):
        with pytest.raises(ValueError):
            walk(cat_graph, START, max_steps=0)

    def test_budget_exactly_sufficient(self, cat_graph):
        result = walk(cat_graph, START, max_steps=4)
        assert result.complete

    def test_budget_one_short(self, cat_graph):
        result = walk(cat_graph, START, max_steps=3)
        assert result.status is WalkStatus.TIMEOUT
        assert render(result) == "The cat sat"

    def test_direction_accepts_string(self, cat_graph):
        result = walk(cat_graph, END, "backward", rng=0)
        assert result.direction is Direction.BACKWARD


class TestRandomness:
    """Tests for injected random sources."""

    def test_same_seed_same_walk(self):
        graph = build("a b c.", "a c b.", "b a c!", "c c a?")
        first = walk(graph, START, rng=1234)
        second = walk(graph, START, rng=1234)
        assert first.units == second.units

    def test_random_instance_accepted(self):
        rng = random.Random(5)
        assert make_rng(rng) is rng

    def test_seed_coerced(self):
        assert make_rng(3).random() == random.Random(3).random()

    def test_weighted_frequencies(self):
        """Test that choices follow observation counts."""
        graph = build(*(["go left"] * 3 + ["go right"]))
        rng = random.Random(99)
        counts = Counter(walk(graph, "go", rng=rng, max_steps=1).units[1].word
                         for _ in range(4000))
        assert counts["left"] / 4000 == pytest.approx(0.75, abs=0.04)


class TestSelectors:
    """Tests for selection policies."""

    CANDIDATES = [
        Transition("a", " ", 2),
        Transition("b", " ", 5),
        Transition("c", " ", 1),
        Transition("d", " ", 5),
    ]

    def test_highest(self):
        assert HighestWeightSelector().choose(self.CANDIDATES, random.Random()).token == "b"

    def test_lowest(self):
        assert LowestWeightSelector().choose(self.CANDIDATES, random.Random()).token == "c"

    def test_uniform_ignores_weight(self):
        rng = random.Random(1)
        counts = Counter(UniformRandomSelector().choose(self.CANDIDATES, rng).token
                         for _ in range(4000))
        assert counts["c"] / 4000 == pytest.approx(0.25, abs=0.04)

    def test_weighted_never_picks_outside(self):
        rng = random.Random(2)
        picks = {WeightedRandomSelector().choose(self.CANDIDATES, rng) for _ in range(200)}
        assert picks <= set(self.CANDIDATES)

    def test_get_selector_by_name(self):
        assert isinstance(get_selector("highest"), HighestWeightSelector)
        assert isinstance(get_selector(None), WeightedRandomSelector)

    def test_get_selector_instance_passthrough(self):
        selector = LowestWeightSelector()
        assert get_selector(selector) is selector

    def test_get_selector_unknown(self):
        with pytest.raises(ValueError):
            get_selector("psychic")

    def test_highest_selector_walk_is_deterministic(self):
        graph = build("I like tea.", "I like tea.", "I hate coffee.")
        result = walk(graph, START, selector="highest")
        assert render(result) == "I like tea."


class TestWalkResult:
    """Tests for WalkResult helpers."""

    def test_reading_order_backward(self):
        result = WalkResult(start=END, direction=Direction.BACKWARD, status=WalkStatus.COMPLETE,
                            steps=2, units=[Unit(END, ""), Unit("x", "!"), Unit(START, "")])
        assert result.reading_order == [Unit(START, ""), Unit("x", "!"), Unit(END, "")]
