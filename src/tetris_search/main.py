"""Command-line entrypoint for tetris-search.

This module provides a small CLI around the search so the
`tetris-search` console script from ``pyproject.toml`` can rank placements
for a board given as a 200-character string.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from tetris_search import __version__
from tetris_search.core.types import GameState
from tetris_search.core.board import board_from_string, board_to_string, frames_per_row
from tetris_search.core.pieces import piece_from_letter
from tetris_search.encoding.encoder import get_lock_value_lookup_encoded
from tetris_search.evaluation.evaluator import (
    default_weights,
    dig_context,
    killscreen_context,
    standard_context,
)
from tetris_search.evaluation.search import search_depth2

CONTEXT_PRESETS = {
    "standard": standard_context,
    "dig": dig_context,
    "killscreen": killscreen_context,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="tetris-search",
        description="Two-ply NES Tetris placement search",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"tetris-search {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log search statistics",
    )
    subparsers = parser.add_subparsers(dest="command")

    search = subparsers.add_parser("search", help="Rank placements of two pieces")
    search.add_argument("board", help="200 cells, row-major from the top (0 = empty)")
    search.add_argument("first", help="Current piece letter")
    search.add_argument("second", help="Next piece letter")
    search.add_argument("--top", type=int, default=5, help="Outcomes to show")
    search.add_argument("--level", type=int, default=18)
    search.add_argument("--lines", type=int, default=0)
    search.add_argument(
        "--mode",
        choices=sorted(CONTEXT_PRESETS),
        default="standard",
        help="Evaluation context preset",
    )
    search.add_argument("--show-boards", action="store_true", help="Print resulting boards")
    return parser


def run_search(args: argparse.Namespace) -> int:
    """Run one search and print the ranking."""
    state = GameState(
        board=board_from_string(args.board),
        lines=args.lines,
        level=args.level,
    )
    first = piece_from_letter(args.first)
    second = piece_from_letter(args.second)
    context = CONTEXT_PRESETS[args.mode]()
    weights = default_weights()

    count, outcomes = search_depth2(state, first, second, args.top, context, weights)
    print(
        f"{count} outcome(s) at level {state.level} "
        f"(gravity {frames_per_row(state.level)} frames/row)"
    )
    for rank, outcome in enumerate(outcomes, start=1):
        p1 = outcome.first_placement
        p2 = outcome.second_placement
        print(
            f"{rank:2d}. {outcome.score:10.2f}  "
            f"{p1.kind} r{p1.rotation} x{p1.x} y{p1.y}{' tuck' if p1.is_tuck else ''}  "
            f"{p2.kind} r{p2.rotation} x{p2.x} y{p2.y}{' tuck' if p2.is_tuck else ''}  "
            f"lines {outcome.first_lines_cleared}+{outcome.second_lines_cleared}"
        )
        if args.show_boards:
            print(board_to_string(outcome.board))
    print("key:", get_lock_value_lookup_encoded(state, first, second, args.top, context, weights))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint used by the `tetris-search` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if args.command == "search":
        try:
            return run_search(args)
        except ValueError as e:
            parser.error(str(e))
    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
