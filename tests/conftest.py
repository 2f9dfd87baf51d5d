"""Pytest configuration and shared fixtures."""

import pytest

from tetris_search.core.types import GameState, Piece, PieceType


@pytest.fixture
def empty_state():
    """A game state on an empty board."""
    from tetris_search.core.board import empty_board
    return GameState(board=empty_board(), lines=0, level=18)


@pytest.fixture
def weights():
    from tetris_search.evaluation.evaluator import default_weights
    return default_weights()


@pytest.fixture
def context():
    from tetris_search.evaluation.evaluator import standard_context
    return standard_context()


@pytest.fixture(params=list(PieceType), ids=lambda k: k.value)
def spawned_piece(request):
    """Each of the seven pieces at its spawn position."""
    return Piece(kind=request.param)
