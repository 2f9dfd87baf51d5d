"""Tetromino geometry for the Nintendo Rotation System.

Orientations are listed per piece starting from the spawn orientation and
proceeding clockwise. Offsets are (dx, dy) from the pivot with y pointing
down the playfield.

Rotation policy ``nes-v1``:
    - No wall kicks. ``WALL_KICKS`` holds only the identity offset, so a
      rotation that collides in place simply fails.
    - Pieces spawn with their pivot at (SPAWN_X, SPAWN_Y).
    - Cells above row 0 are legal while the piece is moving.
"""

from typing import Dict, List, Tuple

from tetris_search.core.types import Piece, PieceType, SPAWN_X, SPAWN_Y

Offset = Tuple[int, int]
Cells = Tuple[Offset, ...]

ROTATION_POLICY = "nes-v1"

ORIENTATIONS: Dict[PieceType, Tuple[Cells, ...]] = {
    PieceType.T: (
        ((-1, 0), (0, 0), (1, 0), (0, 1)),    # down
        ((0, -1), (-1, 0), (0, 0), (0, 1)),   # left
        ((-1, 0), (0, 0), (1, 0), (0, -1)),   # up
        ((0, -1), (0, 0), (1, 0), (0, 1)),    # right
    ),
    PieceType.J: (
        ((-1, 0), (0, 0), (1, 0), (1, 1)),    # down
        ((0, -1), (0, 0), (-1, 1), (0, 1)),   # left
        ((-1, -1), (-1, 0), (0, 0), (1, 0)),  # up
        ((0, -1), (1, -1), (0, 0), (0, 1)),   # right
    ),
    PieceType.Z: (
        ((-1, 0), (0, 0), (0, 1), (1, 1)),    # horizontal
        ((1, -1), (0, 0), (1, 0), (0, 1)),    # vertical
    ),
    PieceType.O: (
        ((-1, 0), (0, 0), (-1, 1), (0, 1)),
    ),
    PieceType.S: (
        ((0, 0), (1, 0), (-1, 1), (0, 1)),    # horizontal
        ((0, -1), (0, 0), (1, 0), (1, 1)),    # vertical
    ),
    PieceType.L: (
        ((-1, 0), (0, 0), (1, 0), (-1, 1)),   # down
        ((-1, -1), (0, -1), (0, 0), (0, 1)),  # left
        ((1, -1), (-1, 0), (0, 0), (1, 0)),   # up
        ((0, -1), (0, 0), (0, 1), (1, 1)),    # right
    ),
    PieceType.I: (
        ((-2, 0), (-1, 0), (0, 0), (1, 0)),   # horizontal
        ((0, -2), (0, -1), (0, 0), (0, 1)),   # vertical
    ),
}

# Offsets tried, in order, when rotating
WALL_KICKS: Tuple[Offset, ...] = ((0, 0),)


def rotation_count(kind: PieceType) -> int:
    """Number of distinct orientations of a piece."""
    return len(ORIENTATIONS[kind])


def rotate_index(kind: PieceType, rotation: int, clockwise: bool) -> int:
    """Orientation index after one rotation step."""
    step = 1 if clockwise else -1
    return (rotation + step) % rotation_count(kind)


def piece_cells(kind: PieceType, rotation: int, x: int, y: int) -> List[Offset]:
    """Absolute (col, row) cells of a piece.

    Args:
        kind: Which tetromino
        rotation: Orientation index
        x: Pivot column
        y: Pivot row

    Returns:
        List of four (col, row) pairs
    """
    return [(x + dx, y + dy) for dx, dy in ORIENTATIONS[kind][rotation]]


def validate_piece(piece: Piece) -> None:
    """Fail fast on a piece outside the closed set of shapes and orientations.

    Raises:
        ValueError: If the piece kind is unknown or its rotation is out of range
    """
    if not isinstance(piece, Piece):
        raise ValueError(f"Expected a Piece, got {type(piece).__name__}")
    count = rotation_count(piece.kind)
    if not 0 <= piece.rotation < count:
        raise ValueError(
            f"Rotation {piece.rotation} out of range for {piece.kind} "
            f"(has {count} orientations)"
        )


def piece_from_letter(letter: str) -> Piece:
    """Spawn a piece from its letter ("T", "J", "Z", "O", "S", "L", "I").

    Raises:
        ValueError: If the letter names no tetromino
    """
    try:
        kind = PieceType(letter.strip().upper())
    except ValueError:
        raise ValueError(f"Unknown piece letter: {letter!r}") from None
    return Piece(kind=kind, rotation=0, x=SPAWN_X, y=SPAWN_Y)


def spawn_piece(kind: PieceType) -> Piece:
    """A piece of the given kind at the spawn position."""
    return Piece(kind=kind, rotation=0, x=SPAWN_X, y=SPAWN_Y)


ALL_PIECE_TYPES = tuple(PieceType)
