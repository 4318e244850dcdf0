"""
Tests for the Assembler
=======================
Tests for rendering unit sequences in chainkit/assembler.py, in particular
separator placement for sequences collected backward.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chainkit.assembler import render, token_text
from chainkit.graph import ChainGraph
from chainkit.tokenizer import START, END, Unit, tokenize
from chainkit.walk import Direction, walk


class TestRender:
    """Tests for render()."""

    def test_forward_units(self):
        units = [Unit(START, "¿"), Unit("Qué", " "), Unit("tal", "?"), Unit(END, "")]
        assert render(units, Direction.FORWARD) == "¿Qué tal?"

    def test_backward_units_are_reversed(self):
        units = [Unit(END, ""), Unit("tal", "?"), Unit("Qué", " "), Unit(START, "¿")]
        assert render(units, Direction.BACKWARD) == "¿Qué tal?"

    def test_direction_string(self):
        units = [Unit("b", "!"), Unit("a", "-")]
        assert render(units, "backward") == "a-b!"

    def test_plain_tuples_accepted(self):
        assert render([("x", ", "), ("y", "")]) == "x, y"

    def test_sentinels_render_empty(self):
        assert token_text(START) == ""
        assert token_text(END) == ""
        assert token_text("word") == "word"

    def test_empty_sequence(self):
        assert render([]) == ""


class TestBidirectionalRoundTrip:
    """Forward and backward walks over single-sentence graphs reproduce the sentence."""

    @pytest.mark.parametrize("sentence", [
        "The cat sat.",
        "(Parenthetical) opening, then: a list; and -- dashes!",
        "  spaced   out  ",
        "the high-priest's temple",
        "...",
        "",
    ])
    def test_walks_reproduce_sentence(self, sentence):
        graph = ChainGraph()
        graph.learn(tokenize(sentence))

        forward = walk(graph, START, Direction.FORWARD, rng=0)
        backward = walk(graph, END, Direction.BACKWARD, rng=0)

        assert forward.complete and backward.complete
        assert render(forward) == sentence
        assert render(backward) == sentence
        assert render(backward.units, Direction.BACKWARD) == sentence
