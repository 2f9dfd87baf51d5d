#!/usr/bin/env python3
"""Smoke test: verify the search plays a sane game end to end.

Run this before wiring the search into a live game loop. It:
1. Plays a short game where every decision comes from a two-ply search
2. Checks that the game survives the whole piece sequence and clears lines
3. Checks that repeated searches on the same input agree exactly
4. Reports per-decision timing against the frame budget
5. PASSes only if every check holds

Usage:
    python scripts/smoke_test.py
"""

import sys
import time
import numpy as np

from tetris_search.core.board import apply_placement, empty_board, line_clear_reward, print_board
from tetris_search.core.pieces import ALL_PIECE_TYPES, spawn_piece
from tetris_search.core.types import GameState
from tetris_search.evaluation.evaluator import default_weights, standard_context
from tetris_search.evaluation.search import SearchCache, cached_search_depth2, search_depth2

NUM_PIECES = 60
KEEP_TOP_N = 3
# NES runs at 60.0988 frames per second; a decision should fit in a few frames
DECISION_BUDGET_MS = 250.0


def play_game(num_pieces, rng, context, weights):
    """Play one game and return (final state, pieces placed, score, decision times)."""
    state = GameState(board=empty_board(), lines=0, level=18)
    sequence = [ALL_PIECE_TYPES[i] for i in rng.integers(0, len(ALL_PIECE_TYPES), num_pieces + 1)]
    score = 0
    times = []

    for i in range(num_pieces):
        current = spawn_piece(sequence[i])
        preview = spawn_piece(sequence[i + 1])

        t0 = time.perf_counter()
        count, outcomes = search_depth2(state, current, preview, KEEP_TOP_N, context, weights)
        times.append((time.perf_counter() - t0) * 1000.0)

        if count == 0:
            return state, i, score, times

        # Only the first placement is committed; the preview is searched again next turn
        board, cleared = apply_placement(state.board, outcomes[0].first_placement)
        score += line_clear_reward(cleared, state.level)
        state = GameState(board=board, lines=state.lines + cleared, level=state.level)

    return state, num_pieces, score, times


def main():
    print("=" * 60)
    print("  SMOKE TEST: Two-ply placement search")
    print("=" * 60)
    print()

    context = standard_context()
    weights = default_weights()
    rng = np.random.default_rng(42)

    # --- Check 1: Survive a short game ---
    print(f"[1/3] Playing {NUM_PIECES} pieces with the search choosing every move...")
    t0 = time.time()
    state, placed, score, times = play_game(NUM_PIECES, rng, context, weights)
    elapsed = time.time() - t0
    survived = placed == NUM_PIECES
    print(f"       Placed {placed}/{NUM_PIECES} pieces in {elapsed:.1f}s "
          f"{'OK' if survived else 'FAIL (topped out)'}")
    print(f"       Lines: {state.lines}, score: {score}")
    cleared_lines = state.lines > 0
    print_board(state.board)

    # --- Check 2: Determinism ---
    print("[2/3] Checking that repeated searches agree...")
    current = spawn_piece(ALL_PIECE_TYPES[0])
    preview = spawn_piece(ALL_PIECE_TYPES[-1])
    first = search_depth2(state, current, preview, KEEP_TOP_N, context, weights)
    second = search_depth2(state, current, preview, KEEP_TOP_N, context, weights)
    cache = SearchCache()
    cached_search_depth2(cache, state, current, preview, KEEP_TOP_N, context, weights)
    third = cached_search_depth2(cache, state, current, preview, KEEP_TOP_N, context, weights)
    deterministic = first == second == third and cache.hits == 1
    print(f"       Deterministic: {'OK' if deterministic else 'FAIL'}")

    # --- Check 3: Timing ---
    print("[3/3] Decision timing...")
    mean_ms = float(np.mean(times)) if times else 0.0
    worst_ms = float(np.max(times)) if times else 0.0
    fast_enough = mean_ms < DECISION_BUDGET_MS
    print(f"       Mean {mean_ms:.1f} ms, worst {worst_ms:.1f} ms "
          f"(budget {DECISION_BUDGET_MS:.0f} ms) {'OK' if fast_enough else 'SLOW'}")

    # --- Results ---
    print()
    print("=" * 60)
    all_pass = survived and cleared_lines and deterministic and fast_enough
    if all_pass:
        print("  PASS: Search survives, clears lines, and is deterministic.")
    else:
        print("  RESULT: Partial pass")
    print(f"    Survived game:      {'YES' if survived else 'NO'}")
    print(f"    Cleared lines:      {'YES' if cleared_lines else 'NO'}")
    print(f"    Deterministic:      {'YES' if deterministic else 'NO'}")
    print(f"    Within budget:      {'YES' if fast_enough else 'NO'}")
    print("=" * 60)
    return 0 if all_pass else 1


if __name__ == "__main__":
    sys.exit(main())
