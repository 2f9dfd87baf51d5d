"""Core game logic and data structures."""

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
    NUM_ROW,
    NUM_COLUMN,
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
    "NUM_ROW",
    "NUM_COLUMN",
]
