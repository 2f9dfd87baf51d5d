"""Canonical lookup keys for search calls.

A search call is fully determined by its inputs, so its result can be
memoized under a string built from them. The key is computed without any
board enumeration and never raises for well-formed inputs.

Key layout (fields separated by ``|``)::

    nes-v1|fast-eval-v1|<board>|<lines>|<level>|<piece>|<piece>|<top n>|<context>|<weights>

- ``board``: 200 characters of 0/1, row-major from the top row
- ``piece``: ``kind:rotation:x:y``
- ``context``: EvalContext fields in declaration order, ``-`` for None
- ``weights``: FastEvalWeights coefficients in declaration order as
  ``repr(float)``, which round-trips exactly

The two leading tags name the rotation and evaluation policies; bumping
either invalidates every previously stored key.
"""

from dataclasses import fields
from enum import Enum

from tetris_search.core.types import (
    EvalContext,
    FastEvalWeights,
    GameState,
    Piece,
)
from tetris_search.core.board import encode_board_string
from tetris_search.core.pieces import ROTATION_POLICY
from tetris_search.evaluation.evaluator import EVAL_POLICY

FIELD_SEPARATOR = "|"
VALUE_SEPARATOR = ","


def _encode_value(value: object) -> str:
    if value is None:
        return "-"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        return repr(value)
    return str(value)


def encode_piece(piece: Piece) -> str:
    """Encode a piece as ``kind:rotation:x:y``.

    A T piece at spawn encodes as ``T:0:5:0``.
    """
    return f"{piece.kind.value}:{piece.rotation}:{piece.x}:{piece.y}"


def encode_context(context: EvalContext) -> str:
    """Encode every EvalContext field in declaration order."""
    return VALUE_SEPARATOR.join(
        _encode_value(getattr(context, f.name)) for f in fields(context)
    )


def encode_weights(weights: FastEvalWeights) -> str:
    """Encode every coefficient in declaration order."""
    return VALUE_SEPARATOR.join(
        repr(float(getattr(weights, f.name))) for f in fields(weights)
    )


def get_lock_value_lookup_encoded(
    state: GameState,
    first_piece: Piece,
    second_piece: Piece,
    keep_top_n: int,
    context: EvalContext,
    weights: FastEvalWeights,
) -> str:
    """Build the memoization key of a ``search_depth2`` call.

    Args:
        state: Board and counters
        first_piece: Current piece
        second_piece: Next piece
        keep_top_n: Number of outcomes requested
        context: Rule variants
        weights: Evaluation coefficients

    Returns:
        Deterministic key; inputs differing in any board cell, piece field,
        counter, keep_top_n, context field or coefficient give different keys
    """
    parts = [
        ROTATION_POLICY,
        EVAL_POLICY,
        encode_board_string(state.board),
        str(state.lines),
        str(state.level),
        encode_piece(first_piece),
        encode_piece(second_piece),
        str(keep_top_n),
        encode_context(context),
        encode_weights(weights),
    ]
    return FIELD_SEPARATOR.join(parts)
