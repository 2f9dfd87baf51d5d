"""
Tetris Search - two-ply placement search and evaluation for NES Tetris.
"""

__version__ = "0.1.0"

# Core exports
from tetris_search.core.types import (
    Board,
    GameState,
    PieceType,
    Piece,
    Placement,
    ClearMode,
    EvalContext,
    FastEvalWeights,
    TwoPlyOutcome,
)

__all__ = [
    "Board",
    "GameState",
    "PieceType",
    "Piece",
    "Placement",
    "ClearMode",
    "EvalContext",
    "FastEvalWeights",
    "TwoPlyOutcome",
]
