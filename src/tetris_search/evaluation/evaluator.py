"""Fast heuristic board evaluation.

A board is reduced to a fixed vector of features and scored as the dot
product with a ``FastEvalWeights`` vector. Every feature is computed with a
constant number of passes over the grid and is finite for every board,
including the empty one, which scores exactly 0 on every feature.

Feature policy ``fast-eval-v1`` (order matters, it matches the weight fields):
    avg_height          mean height of the non-well columns
    bumpiness           sum of adjacent height differences, non-well columns
    holes               empty cells below the top block of their column
    row_transitions     filled/empty changes along rows holding a block
    column_transitions  filled/empty changes from each column top to the floor
    well_depth          well column depth below its shallowest neighbour (max 4)
    covered_well        filled well-column cells above an empty well-column cell
    well_column_height  height of the well column
    burned_lines        lines from non-tetris clears (TETRIS_ONLY mode only)
    tetrises            number of four-line clears
    lines_cleared       total lines cleared
    scare_excess        rows by which the tallest column passes scare_height
    spire_height        tallest non-well column minus the average height
    parity              absolute checkerboard parity of filled cells
    topped_out          1 when the tallest column passes max_safe_height
"""

from dataclasses import fields
from typing import Dict, Sequence
import numpy as np
from numpy.typing import NDArray

from tetris_search.core.types import (
    Board,
    ClearMode,
    EvalContext,
    FastEvalWeights,
    NUM_COLUMN,
    NUM_ROW,
)
from tetris_search.core.board import column_heights


EVAL_POLICY = "fast-eval-v1"

FEATURE_NAMES = tuple(f.name for f in fields(FastEvalWeights))

# Cap on the well depth credited to a board; deeper wells are no more useful
MAX_CREDITED_WELL_DEPTH = 4

# Node cap of the presets; above the 34 x 34 pairs of an open board
DEFAULT_MAX_SEARCH_NODES = 2048

# +1 on cells where (row + col) is even, -1 elsewhere
_PARITY_SIGNS = np.where(np.indices((NUM_ROW, NUM_COLUMN)).sum(axis=0) % 2 == 0, 1, -1)


# ==============================================================================
# CONFIGURATION PRESETS
# ==============================================================================


def default_weights() -> FastEvalWeights:
    """Weights tuned for stacking toward tetrises on levels 18-19.

    Returns:
        FastEvalWeights with the default coefficients
    """
    return FastEvalWeights()


def standard_context() -> EvalContext:
    """Tetris-focused play: right well kept open, burns penalized.

    Returns:
        EvalContext with TETRIS_ONLY clears and the well on column 9
    """
    return EvalContext(
        clear_mode=ClearMode.TETRIS_ONLY,
        well_column=9,
        scare_height=8,
        max_safe_height=17,
        max_search_nodes=DEFAULT_MAX_SEARCH_NODES,
    )


def dig_context() -> EvalContext:
    """Digging out of a messy stack: every clear helps, no reserved well.

    Returns:
        EvalContext with ANY_CLEAR clears and no well
    """
    return EvalContext(
        clear_mode=ClearMode.ANY_CLEAR,
        well_column=None,
        scare_height=8,
        max_safe_height=17,
        max_search_nodes=DEFAULT_MAX_SEARCH_NODES,
    )


def killscreen_context() -> EvalContext:
    """Level 29 play: pieces fall every frame, so keep the stack low.

    Returns:
        EvalContext with ANY_CLEAR clears and a lower danger zone
    """
    return EvalContext(
        clear_mode=ClearMode.ANY_CLEAR,
        well_column=None,
        scare_height=4,
        max_safe_height=12,
        max_search_nodes=DEFAULT_MAX_SEARCH_NODES,
    )


# ==============================================================================
# FEATURE EXTRACTION
# ==============================================================================


def _validate_clears(clears: Sequence[int]) -> None:
    for n in clears:
        if not 0 <= n <= 4:
            raise ValueError(f"Invalid line clear count: {n}")


def extract_features(
    board: Board,
    context: EvalContext,
    clears: Sequence[int] = (),
) -> NDArray[np.float64]:
    """Compute the feature vector of a board.

    Args:
        board: Board to describe
        context: Rule variants (well column, clear mode, danger thresholds)
        clears: Lines cleared by each placement that produced this board

    Returns:
        Array of len(FEATURE_NAMES) features, in FEATURE_NAMES order
    """
    _validate_clears(clears)
    cells = board.cells
    width = cells.shape[1]
    heights = column_heights(board)
    well = context.well_column

    surface = heights if well is None else np.delete(heights, well)
    avg_height = float(surface.mean()) if surface.size else 0.0
    bumpiness = float(np.abs(np.diff(surface)).sum()) if surface.size > 1 else 0.0

    # True at and below the top block of each column
    below_top = np.logical_or.accumulate(cells, axis=0)
    holes = np.count_nonzero(below_top & ~cells)

    # Walls count as filled
    walled = np.pad(cells, ((0, 0), (1, 1)), constant_values=True)
    row_changes = walled[:, 1:] != walled[:, :-1]
    row_transitions = np.count_nonzero(row_changes[cells.any(axis=1)])

    # Floor counts as filled; change between row i and row i + 1
    floored = np.vstack([cells, np.ones((1, width), dtype=bool)])
    col_changes = floored[1:] != floored[:-1]
    column_transitions = np.count_nonzero(col_changes & below_top)

    well_depth = covered_well = well_column_height = 0
    if well is not None:
        neighbours = [int(heights[c]) for c in (well - 1, well + 1) if 0 <= c < width]
        if neighbours:
            well_depth = min(
                max(0, min(neighbours) - int(heights[well])),
                MAX_CREDITED_WELL_DEPTH,
            )
        column = cells[:, well]
        empty_at_or_below = np.logical_or.accumulate(~column[::-1])[::-1]
        empty_strictly_below = np.append(empty_at_or_below[1:], False)
        covered_well = np.count_nonzero(column & empty_strictly_below)
        well_column_height = int(heights[well])

    if context.clear_mode == ClearMode.TETRIS_ONLY:
        burned_lines = sum(n for n in clears if n < 4)
    else:
        burned_lines = 0
    tetrises = sum(1 for n in clears if n == 4)
    lines_cleared = sum(clears)

    max_height = int(heights.max())
    scare_excess = max(0, max_height - context.scare_height)
    spire_height = max(0.0, float(surface.max()) - avg_height) if surface.size else 0.0
    parity = abs(int(_PARITY_SIGNS[cells].sum()))
    topped_out = 1 if max_height > context.max_safe_height else 0

    return np.array(
        [
            avg_height,
            bumpiness,
            holes,
            row_transitions,
            column_transitions,
            well_depth,
            covered_well,
            well_column_height,
            burned_lines,
            tetrises,
            lines_cleared,
            scare_excess,
            spire_height,
            parity,
            topped_out,
        ],
        dtype=np.float64,
    )


def describe_features(
    board: Board,
    context: EvalContext,
    clears: Sequence[int] = (),
) -> Dict[str, float]:
    """Feature values keyed by name, for debugging and display."""
    values = extract_features(board, context, clears)
    return {name: float(v) for name, v in zip(FEATURE_NAMES, values)}


# ==============================================================================
# SCORING
# ==============================================================================


def fast_eval(
    board: Board,
    context: EvalContext,
    weights: FastEvalWeights,
    clears: Sequence[int] = (),
) -> float:
    """Score a board as the weighted sum of its features.

    Higher is better. A board past the top-out threshold gets the
    ``topped_out`` coefficient added, which keeps it finite and comparable
    with other bad boards.

    Args:
        board: Board to score
        context: Rule variants
        weights: Feature coefficients
        clears: Lines cleared by each placement that produced this board

    Returns:
        Finite score
    """
    features = extract_features(board, context, clears)
    return float(np.dot(features, weights.to_array()))
