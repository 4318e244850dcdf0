#!/usr/bin/env python3
"""
chainkit CLI
============
Command-line interface for training chains and generating sentences.

Usage:
    chainkit train corpus.txt more.txt -o model.json
    chainkit generate -m model.json -n 5 --seed priest
    chainkit walk priest -c corpus.txt --backward
    chainkit stats -m model.json
    chainkit chat -c corpus.txt
"""

import argparse
import sys
from pathlib import Path

# Add parent to path
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

from rich.console import Console
from rich.table import Table

from chainkit import __version__
from chainkit.errors import ChainError
from chainkit.settings import resolve_path
from chainkit.walk import SELECTORS

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False, emoji=False, soft_wrap=True)
        self.err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, markup=False, **kwargs)

    def result(self, text: str):
        """Primary output; printed even in quiet mode."""
        self.console.print(text, markup=False)

    def error(self, msg: str):
        self.err_console.print(f"Error: {msg}", markup=False)

    def table(self, title: str, headers: list, rows: list):
        """Print a formatted table."""
        if self.quiet:
            return
        table = Table(title=title)
        for header in headers:
            table.add_column(str(header))
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def load_source(args, out: Output):
    """Build a WordChain from --model or --corpus."""
    from chainkit import WordChain, load_chain, learn_files

    if getattr(args, 'model', None):
        chain = load_chain(resolve_path(args.model))
        out.print(f"Loaded model from {args.model}")
        return chain

    chain = WordChain()
    corpus = [resolve_path(p) for p in getattr(args, "corpus", None) or []]
    failed = learn_files(chain, corpus)
    for path in failed:
        out.error(f"Could not read {path}")
    if corpus:
        out.print(f"Trained on {len(corpus) - len(failed)} file(s), "
                  f"{chain.stats().sentences} sentences")
    return chain


def add_source_args(p, required: bool = True):
    group = p.add_mutually_exclusive_group(required=required)
    group.add_argument('--model', '-m', help='Trained model JSON file')
    group.add_argument('--corpus', '-c', nargs='+', help='Corpus text files (one sentence per line)')


def add_walk_args(p):
    p.add_argument('--selector', choices=sorted(SELECTORS), help='Transition selection policy')
    p.add_argument('--max-steps', type=int, help='Step budget per walk')
    p.add_argument('--random-seed', type=int, help='Seed for reproducible output')


# =============================================================================
# Commands
# =============================================================================

def cmd_train(args, out: Output):
    """Train a model from corpus files."""
    from chainkit import WordChain, learn_files, save_chain

    files = [resolve_path(p) for p in args.files]
    output = resolve_path(args.output)

    chain = WordChain()
    failed = learn_files(chain, files)
    for path in failed:
        out.error(f"Could not read {path}")
    if len(failed) == len(files):
        return 1

    stats = chain.stats()
    save_chain(chain, output)
    out.print(f"Learned {stats.sentences} sentences: {stats.words} words, {stats.edges} edges")
    out.print(f"Model saved to {output}")
    return 1 if failed else 0


def cmd_generate(args, out: Output):
    """Generate sentences."""
    chain = load_source(args, out)

    compositions = chain.generate_batch(
        count=args.count,
        seed=args.seed,
        rng=args.random_seed,
        workers=args.workers,
        max_steps=args.max_steps,
        selector=args.selector,
    )

    for i, composition in enumerate(compositions, 1):
        marker = "" if composition.complete else "  [incomplete]"
        if args.number:
            out.result(f"{i:2}. {composition.text}{marker}")
        else:
            out.result(f"{composition.text}{marker}")

    return 0


def cmd_walk(args, out: Output):
    """Perform a single walk from a word."""
    from chainkit import Direction

    chain = load_source(args, out)
    direction = Direction.BACKWARD if args.backward else Direction.FORWARD

    result = chain.walk(args.word, direction, args.max_steps, args.random_seed, args.selector)

    out.result(chain.render(result))
    out.print(f"[{result.status.value}, {result.steps} steps]")
    return 0 if result.complete else 2


def cmd_stats(args, out: Output):
    """Show graph statistics."""
    chain = load_source(args, out)
    stats = chain.stats()

    rows = [
        ['Sentences', stats.sentences],
        ['Words', stats.words],
        ['Nodes', stats.nodes],
        ['Edges', stats.edges],
        ['Distinct separators', stats.separators],
        ['Total weight', stats.total_weight],
    ]
    out.table('Chain statistics', ['Metric', 'Value'], rows)
    return 0


def cmd_chat(args, out: Output):
    """Interactive loop: learn each line and reply with a sentence."""
    from chainkit.walk import make_rng

    chain = load_source(args, out)
    rng = make_rng(args.random_seed)

    out.print("Type a sentence; Ctrl-D to quit.")
    while True:
        try:
            line = input("> ")
        except EOFError:
            out.print()
            return 0

        line = line.strip()
        if line:
            chain.learn(line)

        seed = chain.seed_from_prompt(line, rng)
        composition = chain.compose(seed, rng=rng, max_steps=args.max_steps,
                                    selector=args.selector)
        out.result(composition.text)
        out.print()


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='chainkit',
        description='chainkit - Separator-aware word Markov chains',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s train corpus.txt -o model.json
  %(prog)s generate -m model.json -n 10
  %(prog)s generate -c corpus.txt --seed priest --random-seed 42
  %(prog)s walk priest -m model.json --backward
  %(prog)s stats -m model.json
  %(prog)s chat -c corpus.txt
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- train ---
    p = subparsers.add_parser('train', aliases=['t'], help='Train a model from corpus files')
    p.add_argument('files', nargs='+', help='Corpus text files (one sentence per line)')
    p.add_argument('--output', '-o', required=True, help='Model JSON file to write')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate sentences')
    add_source_args(p)
    p.add_argument('-n', '--count', type=int, help='Number of sentences (default: batch.count)')
    p.add_argument('--seed', '-s', help='Word every sentence must contain')
    p.add_argument('--workers', '-w', type=int, help='Worker threads (default: batch.workers)')
    p.add_argument('--number', action='store_true', help='Number the output lines')
    add_walk_args(p)

    # --- walk ---
    p = subparsers.add_parser('walk', aliases=['w'], help='Walk from a word to a sentence boundary')
    p.add_argument('word', help='Starting word')
    p.add_argument('--backward', '-b', action='store_true', help='Walk toward the sentence start')
    add_source_args(p)
    add_walk_args(p)

    # --- stats ---
    p = subparsers.add_parser('stats', help='Show chain statistics')
    add_source_args(p)

    # --- chat ---
    p = subparsers.add_parser('chat', help='Learn and reply interactively')
    add_source_args(p, required=False)
    add_walk_args(p)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Handle aliases
    cmd_map = {
        't': 'train',
        'gen': 'generate', 'g': 'generate',
        'w': 'walk',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)

    from chainkit.config import configure_logging
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    commands = {
        'train': cmd_train,
        'generate': cmd_generate,
        'walk': cmd_walk,
        'stats': cmd_stats,
        'chat': cmd_chat,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except (ChainError, ValueError, OSError) as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
