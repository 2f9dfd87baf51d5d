"""Board representation and game rules.

This module implements the board-level rules the search relies on:
- Board construction and text conversion
- Collision testing
- Locking a placement and clearing full lines
- Board queries (column heights, top-out)

Board Layout:
    Row 0 is the top of the playfield, row 19 the floor. Columns run
    0 (left wall) to 9 (right wall).

         0 1 2 3 4 5 6 7 8 9
     0  . . . . . . . . . .   <- spawn row
     1  . . . . . . . . . .
        ...
    19  . . . . . . . . . .   <- floor
"""

from typing import List, Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

from tetris_search.core.types import (
    Board,
    NUM_COLUMN,
    NUM_ROW,
    Piece,
    PieceType,
    Placement,
)
from tetris_search.core.pieces import ORIENTATIONS, piece_cells


# Points per clear (0-4 lines), multiplied by (level + 1)
REWARDS = (0, 40, 100, 300, 1200)

# Frames per row of gravity by level; level 29 and beyond fall every frame
GRAVITY = (
    48, 43, 38, 33, 28, 23, 18, 13, 8, 6,
    5, 5, 5, 4, 4, 4, 3, 3, 3, 2,
    2, 2, 2, 2, 2, 2, 2, 2, 2, 1,
)


# ==============================================================================
# BOARD CONSTRUCTION
# ==============================================================================

def empty_board() -> Board:
    """Create an empty board.

    Returns:
        Board with no filled cells
    """
    return Board()


def board_from_string(text: str) -> Board:
    """Parse a row-major board string.

    Each character is a cell: ``0`` is empty, ``1``-``3`` are the three piece
    colors. Whitespace is ignored, so the string may be wrapped per row.

    Args:
        text: NUM_ROW * NUM_COLUMN cell characters

    Returns:
        Parsed board

    Raises:
        ValueError: If the string has the wrong length or unknown characters
    """
    cells = "".join(text.split())
    if len(cells) != NUM_ROW * NUM_COLUMN:
        raise ValueError(
            f"Board string must have {NUM_ROW * NUM_COLUMN} cells, got {len(cells)}"
        )
    bad = set(cells) - set("0123")
    if bad:
        raise ValueError(f"Invalid board characters: {''.join(sorted(bad))}")
    grid = np.array([c != "0" for c in cells], dtype=bool).reshape(NUM_ROW, NUM_COLUMN)
    return Board(cells=grid)


def board_from_rows(rows: Sequence[str]) -> Board:
    """Build a board from the bottom rows, drawn as text.

    ``X`` (or ``#``) marks a filled cell, ``.`` an empty one. The last string
    is the floor row; rows above the given ones are empty.

    Args:
        rows: Up to NUM_ROW strings of NUM_COLUMN characters each

    Returns:
        Board with the rows placed at the bottom

    Examples:
        >>> board = board_from_rows(["XXXXXXXXX."])
        >>> board.filled_count()
        9
    """
    if len(rows) > NUM_ROW:
        raise ValueError(f"At most {NUM_ROW} rows allowed, got {len(rows)}")
    grid = np.zeros((NUM_ROW, NUM_COLUMN), dtype=bool)
    offset = NUM_ROW - len(rows)
    for i, row in enumerate(rows):
        if len(row) != NUM_COLUMN:
            raise ValueError(f"Row {i} must have {NUM_COLUMN} cells, got {len(row)}")
        for col, ch in enumerate(row):
            if ch in "X#":
                grid[offset + i, col] = True
            elif ch != ".":
                raise ValueError(f"Invalid row character: {ch!r}")
    return Board(cells=grid)


def encode_board_string(board: Board) -> str:
    """Canonical row-major 0/1 string of a board's occupancy."""
    return "".join("1" if c else "0" for c in board.cells.ravel().tolist())


def validate_board(board: Board) -> None:
    """Fail fast on a malformed board.

    Raises:
        ValueError: If the value is not a Board of the standard dimensions
    """
    if not isinstance(board, Board):
        raise ValueError(f"Expected a Board, got {type(board).__name__}")
    if board.cells.shape != (NUM_ROW, NUM_COLUMN):
        raise ValueError(
            f"Board must be {NUM_ROW}x{NUM_COLUMN}, got shape {board.cells.shape}"
        )


# ==============================================================================
# BOARD QUERIES
# ==============================================================================

def column_heights(board: Board) -> NDArray[np.int64]:
    """Height of each column, measured from the floor to its top filled cell.

    Args:
        board: Board to measure

    Returns:
        Array of NUM_COLUMN heights (0 for an empty column)
    """
    cells = board.cells
    has_block = cells.any(axis=0)
    top_row = np.argmax(cells, axis=0)
    return np.where(has_block, cells.shape[0] - top_row, 0).astype(np.int64)


def line_clear_reward(lines: int, level: int) -> int:
    """NES points for clearing ``lines`` rows at once on ``level``.

    Raises:
        ValueError: If more than four lines are cleared at once
    """
    if not 0 <= lines < len(REWARDS):
        raise ValueError(f"Invalid line clear count: {lines}")
    return REWARDS[lines] * (level + 1)


def frames_per_row(level: int) -> int:
    """Gravity speed on a level, in frames per row."""
    if level < 0:
        raise ValueError(f"Invalid level: {level}")
    return GRAVITY[min(level, len(GRAVITY) - 1)]


# ==============================================================================
# COLLISION AND LOCKING
# ==============================================================================

def grid_collides(
    grid: List[List[bool]],
    kind: PieceType,
    rotation: int,
    x: int,
    y: int,
) -> bool:
    """Collision test against a board converted with ``cells.tolist()``.

    Walls and floor collide; cells above row 0 do not.
    """
    for dx, dy in ORIENTATIONS[kind][rotation]:
        col = x + dx
        row = y + dy
        if col < 0 or col >= NUM_COLUMN or row >= NUM_ROW:
            return True
        if row >= 0 and grid[row][col]:
            return True
    return False


def collides(board: Board, kind: PieceType, rotation: int, x: int, y: int) -> bool:
    """Check whether a piece at a position overlaps the walls, floor or stack.

    Args:
        board: Board to test against
        kind: Which tetromino
        rotation: Orientation index
        x: Pivot column
        y: Pivot row

    Returns:
        True if the position is illegal
    """
    cells = board.cells
    for col, row in piece_cells(kind, rotation, x, y):
        if col < 0 or col >= NUM_COLUMN or row >= NUM_ROW:
            return True
        if row >= 0 and cells[row, col]:
            return True
    return False


def is_topped_out(board: Board, piece: Piece) -> bool:
    """A board is topped out for a piece when the piece collides where it stands."""
    return collides(board, piece.kind, piece.rotation, piece.x, piece.y)


def lock_piece(board: Board, placement: Placement) -> Board:
    """Write a placement's cells into a copy of the board.

    Args:
        board: Board before locking
        placement: Where the piece rests

    Returns:
        New board containing the piece (lines are not cleared)

    Raises:
        ValueError: If the placement leaves the board or overlaps the stack
    """
    grid = board.cells.copy()
    for col, row in piece_cells(placement.kind, placement.rotation, placement.x, placement.y):
        if not (0 <= col < NUM_COLUMN and 0 <= row < NUM_ROW):
            raise ValueError(f"Placement {placement} leaves the board at ({col}, {row})")
        if grid[row, col]:
            raise ValueError(f"Placement {placement} overlaps the stack at ({col}, {row})")
        grid[row, col] = True
    return Board(cells=grid)


def clear_lines(board: Board) -> Tuple[Board, int]:
    """Remove full rows and shift everything above them down.

    Args:
        board: Board possibly containing full rows

    Returns:
        (board without full rows, number of rows removed)
    """
    cells = board.cells
    full = cells.all(axis=1)
    num_cleared = int(np.count_nonzero(full))
    if num_cleared == 0:
        return board, 0
    remaining = cells[~full]
    grid = np.zeros_like(cells)
    grid[num_cleared:] = remaining
    return Board(cells=grid), num_cleared


def apply_placement(board: Board, placement: Placement) -> Tuple[Board, int]:
    """Lock a placement and apply the line-clear rule.

    Returns:
        (resulting board, lines cleared)
    """
    return clear_lines(lock_piece(board, placement))


# ==============================================================================
# BOARD DISPLAY (for debugging)
# ==============================================================================

def board_to_string(board: Board) -> str:
    """Convert board to string representation.

    Args:
        board: Board to display

    Returns:
        ASCII art representation
    """
    lines = []
    lines.append("+" + "-" * (2 * NUM_COLUMN) + "+")
    for row in board.cells.tolist():
        lines.append("|" + "".join("[]" if c else " ." for c in row) + "|")
    lines.append("+" + "-" * (2 * NUM_COLUMN) + "+")
    return "\n".join(lines)


def print_board(board: Board) -> None:
    """Print board to console.

    Args:
        board: Board to print
    """
    print(board_to_string(board))
