"""Two-ply placement search.

For the current piece and the next piece, every pair of legal placements is
played out on the board and the final board is scored with the fast
evaluator. The best ``keep_top_n`` outcomes are returned, best first.

Terminology:
- Ply 1: placing the current piece on the input board, then clearing lines.
- Ply 2: placing the next piece on each ply-1 board, then clearing lines.

Features:
- Deterministic ranking: placements are enumerated in a fixed order and
  equal scores keep their discovery order.
- Node cap: ``EvalContext.max_search_nodes`` bounds the number of scored
  outcomes so a pathological board cannot blow the per-decision budget.
- Search cache: memoize whole search calls keyed by the encoder's lookup
  string.
"""

import logging
import time
from typing import Dict, List, Optional, Tuple

from tetris_search.core.types import (
    EvalContext,
    FastEvalWeights,
    GameState,
    Piece,
    TwoPlyOutcome,
)
from tetris_search.core.board import apply_placement, line_clear_reward, validate_board
from tetris_search.core.moves import generate_placements
from tetris_search.core.pieces import validate_piece
from tetris_search.evaluation.evaluator import fast_eval
from tetris_search.evaluation.top_n import TopNSelector

logger = logging.getLogger(__name__)

SearchResult = Tuple[int, List[TwoPlyOutcome]]


# ==============================================================================
# INPUT VALIDATION
# ==============================================================================


def _validate_inputs(
    state: GameState,
    first_piece: Piece,
    second_piece: Piece,
    context: EvalContext,
    weights: FastEvalWeights,
) -> None:
    """Check the caller's side of the contract.

    Raises:
        ValueError: On a malformed state, piece, context or weight vector
    """
    if not isinstance(state, GameState):
        raise ValueError(f"Expected a GameState, got {type(state).__name__}")
    validate_board(state.board)
    validate_piece(first_piece)
    validate_piece(second_piece)
    if not isinstance(context, EvalContext):
        raise ValueError(f"Expected an EvalContext, got {type(context).__name__}")
    if not isinstance(weights, FastEvalWeights):
        raise ValueError(f"Expected FastEvalWeights, got {type(weights).__name__}")


# ==============================================================================
# DEPTH-TWO SEARCH
# ==============================================================================


def search_depth2(
    state: GameState,
    first_piece: Piece,
    second_piece: Piece,
    keep_top_n: int,
    context: EvalContext,
    weights: FastEvalWeights,
) -> SearchResult:
    """Rank every (first placement, second placement) pair.

    Algorithm:
    1. Enumerate placements of ``first_piece`` on the board.
    2. Lock each one and clear lines to get the intermediate board.
    3. Enumerate placements of ``second_piece`` on the intermediate board.
    4. Lock and clear again, then score the final board with both clear
       counts.
    5. Keep the best ``keep_top_n`` outcomes.

    Line clear rewards of both placements are computed at ``state.level``.

    Args:
        state: Board and counters before the first piece locks
        first_piece: Current piece, usually at spawn
        second_piece: Next piece, at the position it will spawn in
        keep_top_n: How many outcomes to return
        context: Rule variants for scoring
        weights: Evaluation coefficients

    Returns:
        (count, outcomes) with outcomes sorted by descending score and
        ``count == len(outcomes) <= max(keep_top_n, 0)``. Empty when
        ``keep_top_n <= 0`` or when no legal pair of placements exists.

    Raises:
        ValueError: If the board, pieces, context or weights are malformed
    """
    if keep_top_n <= 0:
        return 0, []

    _validate_inputs(state, first_piece, second_piece, context, weights)

    start_time = time.perf_counter()
    board = state.board
    selector: TopNSelector[TwoPlyOutcome] = TopNSelector(keep_top_n)

    first_placements = generate_placements(board, first_piece)
    if not first_placements:
        logger.debug("No legal placement for %s; board is topped out", first_piece.kind)
        return 0, []

    node_limit = context.max_search_nodes
    truncated = False

    for first in first_placements:
        mid_board, first_lines = apply_placement(board, first)
        first_reward = line_clear_reward(first_lines, state.level)

        for second in generate_placements(mid_board, second_piece):
            if node_limit is not None and selector.pushed >= node_limit:
                truncated = True
                break

            final_board, second_lines = apply_placement(mid_board, second)
            score = fast_eval(final_board, context, weights, (first_lines, second_lines))

            selector.push(
                score,
                TwoPlyOutcome(
                    first_placement=first,
                    second_placement=second,
                    board=final_board,
                    score=score,
                    first_lines_cleared=first_lines,
                    second_lines_cleared=second_lines,
                    reward=first_reward + line_clear_reward(second_lines, state.level),
                ),
            )

        if truncated:
            break

    if truncated:
        logger.warning(
            "Search stopped at node cap %d; ranking covers a partial enumeration",
            node_limit,
        )

    outcomes = selector.results()
    logger.debug(
        "search_depth2 %s/%s: %d first placements, %d outcomes scored, "
        "%d kept in %.1f ms",
        first_piece.kind,
        second_piece.kind,
        len(first_placements),
        selector.pushed,
        len(outcomes),
        (time.perf_counter() - start_time) * 1000.0,
    )
    return len(outcomes), outcomes


# ==============================================================================
# SEARCH CACHE
# ==============================================================================


class SearchCache:
    """In-memory memo of whole search calls.

    Keys are lookup strings from ``get_lock_value_lookup_encoded``. When the
    cache exceeds max_size the older half of the entries is dropped (faster
    than maintaining LRU order).

    Args:
        max_size: Maximum number of entries to store.
    """

    def __init__(self, max_size: int = 10_000):
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._table: Dict[str, Tuple[TwoPlyOutcome, ...]] = {}
        self.hits = 0
        self.misses = 0

    def lookup(self, key: str) -> Optional[SearchResult]:
        """Look up a cached search result.

        Returns:
            (count, outcomes) if found, None otherwise.
        """
        outcomes = self._table.get(key)
        if outcomes is None:
            self.misses += 1
            return None
        self.hits += 1
        return len(outcomes), list(outcomes)

    def store(self, key: str, outcomes: List[TwoPlyOutcome]) -> None:
        """Store the outcomes of a search call."""
        if key not in self._table and len(self._table) >= self.max_size:
            keys = list(self._table.keys())
            for k in keys[: len(keys) // 2]:
                del self._table[k]
        self._table[key] = tuple(outcomes)

    def clear(self) -> None:
        """Clear all cached entries."""
        self._table.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: str) -> bool:
        return key in self._table


def cached_search_depth2(
    cache: SearchCache,
    state: GameState,
    first_piece: Piece,
    second_piece: Piece,
    keep_top_n: int,
    context: EvalContext,
    weights: FastEvalWeights,
) -> SearchResult:
    """``search_depth2`` memoized through a SearchCache.

    The key is computed before any search work, so a hit costs one string
    encoding.
    """
    from tetris_search.encoding.encoder import get_lock_value_lookup_encoded

    key = get_lock_value_lookup_encoded(
        state, first_piece, second_piece, keep_top_n, context, weights
    )
    cached = cache.lookup(key)
    if cached is not None:
        return cached

    count, outcomes = search_depth2(
        state, first_piece, second_piece, keep_top_n, context, weights
    )
    cache.store(key, outcomes)
    return count, outcomes
