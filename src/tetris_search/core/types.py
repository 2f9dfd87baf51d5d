"""Core type definitions for the two-ply placement search.

This module defines the value types shared by the move generator, the
evaluator, the search and the encoder. Every type here is immutable once
constructed; the search produces new values instead of mutating inputs.
"""

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Tuple, Optional
import numpy as np
from numpy.typing import NDArray


# ==============================================================================
# BOARD REPRESENTATION
# ==============================================================================

NUM_ROW = 20
NUM_COLUMN = 10


@dataclass(frozen=True, eq=False)
class Board:
    """Occupancy grid.

    Row 0 is the top of the playfield and row ``NUM_ROW - 1`` the floor.
    Per-cell colors are not kept; they never affect placement or scoring.

    Attributes:
        cells: Read-only bool array of shape (NUM_ROW, NUM_COLUMN)
    """
    cells: NDArray[np.bool_] = field(
        default_factory=lambda: np.zeros((NUM_ROW, NUM_COLUMN), dtype=bool)
    )

    def __post_init__(self):
        """Validate dimensions and freeze the underlying array."""
        cells = np.array(self.cells, dtype=bool)
        if cells.shape != (NUM_ROW, NUM_COLUMN):
            raise ValueError(
                f"Board must be {NUM_ROW}x{NUM_COLUMN}, got shape {cells.shape}"
            )
        cells.flags.writeable = False
        object.__setattr__(self, "cells", cells)

    def is_filled(self, row: int, col: int) -> bool:
        """Whether a cell is occupied."""
        return bool(self.cells[row, col])

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.cells, other.cells)

    def __hash__(self) -> int:
        return hash(self.cells.tobytes())


@dataclass(frozen=True)
class GameState:
    """Board plus the counters that affect rewards.

    Attributes:
        board: Current settled board (no active piece)
        lines: Lines cleared so far in the game
        level: Current level (scales line clear rewards)
    """
    board: Board = field(default_factory=Board)
    lines: int = 0
    level: int = 18

    def __post_init__(self):
        if not isinstance(self.board, Board):
            raise ValueError(f"board must be a Board, got {type(self.board).__name__}")
        if self.lines < 0:
            raise ValueError(f"Invalid line count: {self.lines}")
        if self.level < 0:
            raise ValueError(f"Invalid level: {self.level}")


# ==============================================================================
# PIECES AND PLACEMENTS
# ==============================================================================


class PieceType(Enum):
    """The seven tetrominoes, in NES piece id order."""
    T = "T"
    J = "J"
    Z = "Z"
    O = "O"
    S = "S"
    L = "L"
    I = "I"

    def __str__(self) -> str:
        return self.value


# Spawn pivot on the NES playfield
SPAWN_X = 5
SPAWN_Y = 0


@dataclass(frozen=True)
class Piece:
    """Active piece: shape, orientation and pivot position.

    Defaults describe a freshly spawned piece. Rotation validity against the
    shape's orientation table is checked by ``core.pieces.validate_piece``.

    Attributes:
        kind: Which tetromino
        rotation: Orientation index (0 = spawn orientation, +1 = clockwise)
        x: Pivot column
        y: Pivot row (may be negative while in the vanish zone)
    """
    kind: PieceType
    rotation: int = 0
    x: int = SPAWN_X
    y: int = SPAWN_Y

    def __post_init__(self):
        if not isinstance(self.kind, PieceType):
            raise ValueError(f"Unknown piece kind: {self.kind!r}")


@dataclass(frozen=True)
class Placement:
    """A terminal (locked) position of a piece.

    Attributes:
        kind: Which tetromino was placed
        rotation: Orientation index at lock
        x: Pivot column at lock
        y: Pivot row at lock
        is_tuck: True when the piece rests under an overhang, i.e. a straight
            drop from the top of the board in the same orientation and column
            would have stopped higher. Such placements need a tuck or spin.
    """
    kind: PieceType
    rotation: int
    x: int
    y: int
    is_tuck: bool = False


# ==============================================================================
# EVALUATION CONFIGURATION
# ==============================================================================


class ClearMode(Enum):
    """How line clears are rewarded."""
    # Only tetrises are wanted; smaller clears count as burned lines
    TETRIS_ONLY = "tetris_only"
    # Every clear is welcome (digging, killscreen play)
    ANY_CLEAR = "any_clear"


@dataclass(frozen=True)
class EvalContext:
    """Rule variants affecting scoring.

    Attributes:
        clear_mode: Whether non-tetris clears are penalized as burns
        well_column: Column kept open for tetrises, or None for no well
        scare_height: Stack height above which the danger zone starts
        max_safe_height: Stack height above which the board counts as topped out
        max_search_nodes: Cap on scored outcomes per search, None for no cap
    """
    clear_mode: ClearMode = ClearMode.TETRIS_ONLY
    well_column: Optional[int] = NUM_COLUMN - 1
    scare_height: int = 8
    max_safe_height: int = 17
    max_search_nodes: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.clear_mode, ClearMode):
            raise ValueError(f"Unknown clear mode: {self.clear_mode!r}")
        if self.well_column is not None and not 0 <= self.well_column < NUM_COLUMN:
            raise ValueError(f"Invalid well column: {self.well_column}")
        if not 0 <= self.scare_height <= NUM_ROW:
            raise ValueError(f"Invalid scare height: {self.scare_height}")
        if not 0 <= self.max_safe_height <= NUM_ROW:
            raise ValueError(f"Invalid max safe height: {self.max_safe_height}")
        if self.max_search_nodes is not None and self.max_search_nodes < 1:
            raise ValueError(
                f"max_search_nodes must be positive, got {self.max_search_nodes}"
            )


# Largest accepted coefficient magnitude
MAX_WEIGHT_MAGNITUDE = 1e12


@dataclass(frozen=True)
class FastEvalWeights:
    """Coefficients of the fast evaluation, one per board feature.

    Field order matches ``evaluation.evaluator.FEATURE_NAMES``; the score is
    the dot product of the feature vector with ``to_array()``. Negative
    coefficients penalize a feature.
    """
    avg_height: float = -1.5
    bumpiness: float = -1.0
    holes: float = -30.0
    row_transitions: float = -1.0
    column_transitions: float = -2.0
    well_depth: float = 4.0
    covered_well: float = -10.0
    well_column_height: float = -5.0
    burned_lines: float = -15.0
    tetrises: float = 60.0
    lines_cleared: float = 0.0
    scare_excess: float = -8.0
    spire_height: float = -2.0
    parity: float = -0.5
    topped_out: float = -10000.0

    def __post_init__(self):
        """Reject coefficients that would make scores non-finite.

        Every feature is bounded by the board size, so bounding the
        coefficients keeps the weighted sum far from float overflow.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise ValueError(f"Weight {f.name} must be finite, got {value}")
            if abs(value) > MAX_WEIGHT_MAGNITUDE:
                raise ValueError(
                    f"Weight {f.name} must be within +/-{MAX_WEIGHT_MAGNITUDE:g}, got {value}"
                )

    def to_array(self) -> NDArray[np.float64]:
        """Coefficients as a vector in declaration order."""
        return np.array([getattr(self, f.name) for f in fields(self)], dtype=np.float64)


# ==============================================================================
# SEARCH RESULTS
# ==============================================================================


@dataclass(frozen=True)
class TwoPlyOutcome:
    """One scored pair of placements.

    Attributes:
        first_placement: Where the current piece locks
        second_placement: Where the next piece locks afterwards
        board: Board after both placements and their line clears
        score: Fast evaluation of ``board``
        first_lines_cleared: Lines cleared by the first placement
        second_lines_cleared: Lines cleared by the second placement
        reward: NES points earned by both clears
    """
    first_placement: Placement
    second_placement: Placement
    board: Board
    score: float
    first_lines_cleared: int = 0
    second_lines_cleared: int = 0
    reward: int = 0

    @property
    def lines_cleared(self) -> int:
        """Total lines cleared by both placements."""
        return self.first_lines_cleared + self.second_lines_cleared


# Clear counts of the placements that produced a board, in order
ClearCounts = Tuple[int, ...]
