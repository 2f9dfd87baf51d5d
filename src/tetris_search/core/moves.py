"""Legal placement generation.

Enumerates every terminal position a piece can reach from where it stands
using shifts, rotations (through the wall-kick table) and one-row drops.
This includes tucks and spins under overhangs, not only straight drops.
"""

from collections import deque
from typing import Dict, Iterator, List, Set, Tuple

from tetris_search.core.types import Board, Piece, PieceType, Placement
from tetris_search.core.board import grid_collides, is_topped_out, validate_board
from tetris_search.core.pieces import (
    WALL_KICKS,
    piece_cells,
    rotate_index,
    rotation_count,
    validate_piece,
)

# (rotation, x, y)
PieceState = Tuple[int, int, int]


def _neighbours(
    grid: List[List[bool]],
    kind: PieceType,
    state: PieceState,
) -> Iterator[PieceState]:
    """States reachable from ``state`` with a single input.

    Shifts and drops are yielded unconditionally; rotations resolve through
    the kick table and are only yielded when one of the kicks fits.
    """
    rot, x, y = state
    yield rot, x - 1, y
    yield rot, x + 1, y
    if rotation_count(kind) > 1:
        for clockwise in (True, False):
            new_rot = rotate_index(kind, rot, clockwise)
            for kx, ky in WALL_KICKS:
                if not grid_collides(grid, kind, new_rot, x + kx, y + ky):
                    yield new_rot, x + kx, y + ky
                    break
    yield rot, x, y + 1


def _reachable_terminals(
    grid: List[List[bool]],
    kind: PieceType,
    start: PieceState,
) -> List[PieceState]:
    """Breadth-first search over piece states; returns the resting ones."""
    seen: Set[PieceState] = {start}
    queue = deque([start])
    terminals = []

    while queue:
        state = queue.popleft()
        rot, x, y = state
        if grid_collides(grid, kind, rot, x, y + 1):
            terminals.append(state)
        for nxt in _neighbours(grid, kind, state):
            if nxt in seen:
                continue
            seen.add(nxt)
            if not grid_collides(grid, kind, *nxt):
                queue.append(nxt)

    return terminals


def _straight_drop_row(
    grid: List[List[bool]],
    kind: PieceType,
    rot: int,
    x: int,
    start_y: int,
) -> int:
    """Row where the piece stops when dropped straight down from ``start_y``.

    Returns ``start_y - 1`` when the piece does not fit at ``start_y`` at all.
    """
    if grid_collides(grid, kind, rot, x, start_y):
        return start_y - 1
    y = start_y
    while not grid_collides(grid, kind, rot, x, y + 1):
        y += 1
    return y


def generate_placements(board: Board, piece: Piece) -> List[Placement]:
    """Enumerate the distinct terminal placements of a piece.

    Placements are ordered by (rotation, x, y). When several resting states
    cover the same cells only the first in that order is kept. Placements
    with any cell above the top row are dropped.

    Args:
        board: Board to place on
        piece: Piece in its current (usually spawn) state

    Returns:
        List of placements; empty if the piece cannot even stand where it is

    Raises:
        ValueError: If the board or piece is malformed
    """
    validate_board(board)
    validate_piece(piece)

    if is_topped_out(board, piece):
        return []

    grid = board.cells.tolist()
    kind = piece.kind
    start = (piece.rotation, piece.x, piece.y)
    terminals = sorted(_reachable_terminals(grid, kind, start))

    placements = []
    seen_cells: Set[frozenset] = set()
    drop_rows: Dict[Tuple[int, int], int] = {}
    for rot, x, y in terminals:
        cells = piece_cells(kind, rot, x, y)
        if any(row < 0 for _, row in cells):
            continue
        key = frozenset(cells)
        if key in seen_cells:
            continue
        seen_cells.add(key)

        if (rot, x) not in drop_rows:
            drop_rows[(rot, x)] = _straight_drop_row(grid, kind, rot, x, piece.y)
        placements.append(
            Placement(kind=kind, rotation=rot, x=x, y=y, is_tuck=y != drop_rows[(rot, x)])
        )

    return placements


def placement_cells(placement: Placement) -> List[Tuple[int, int]]:
    """Absolute (col, row) cells covered by a placement."""
    return piece_cells(placement.kind, placement.rotation, placement.x, placement.y)
