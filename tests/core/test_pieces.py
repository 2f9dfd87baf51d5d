"""Tests for piece geometry."""

import pytest

from tetris_search.core.pieces import (
    ALL_PIECE_TYPES,
    ORIENTATIONS,
    WALL_KICKS,
    piece_cells,
    piece_from_letter,
    rotate_index,
    rotation_count,
    spawn_piece,
    validate_piece,
)
from tetris_search.core.types import Piece, PieceType, SPAWN_X, SPAWN_Y


class TestOrientations:
    """Tests for the orientation tables."""

    @pytest.mark.parametrize(
        "kind,count",
        [
            (PieceType.T, 4),
            (PieceType.J, 4),
            (PieceType.L, 4),
            (PieceType.Z, 2),
            (PieceType.S, 2),
            (PieceType.I, 2),
            (PieceType.O, 1),
        ],
    )
    def test_rotation_count(self, kind, count):
        assert rotation_count(kind) == count

    def test_every_orientation_has_four_cells(self):
        for kind, orientations in ORIENTATIONS.items():
            for cells in orientations:
                assert len(set(cells)) == 4, kind

    def test_every_orientation_contains_pivot_neighbourhood(self):
        # All offsets stay within two cells of the pivot
        for orientations in ORIENTATIONS.values():
            for cells in orientations:
                for dx, dy in cells:
                    assert -2 <= dx <= 1
                    assert -2 <= dy <= 1

    @pytest.mark.parametrize("kind", [PieceType.T, PieceType.J, PieceType.L])
    def test_clockwise_is_quarter_turn_about_pivot(self, kind):
        orientations = ORIENTATIONS[kind]
        for i, cells in enumerate(orientations):
            turned = {(-dy, dx) for dx, dy in cells}
            assert turned == set(orientations[(i + 1) % len(orientations)])

    def test_no_wall_kicks(self):
        assert WALL_KICKS == ((0, 0),)

    def test_all_piece_types(self):
        assert len(ALL_PIECE_TYPES) == 7
        assert set(ALL_PIECE_TYPES) == set(ORIENTATIONS)


class TestRotation:
    """Tests for rotation index arithmetic."""

    def test_clockwise_then_counterclockwise(self):
        for kind in PieceType:
            for rot in range(rotation_count(kind)):
                cw = rotate_index(kind, rot, clockwise=True)
                assert rotate_index(kind, cw, clockwise=False) == rot

    def test_wraps_around(self):
        assert rotate_index(PieceType.T, 3, clockwise=True) == 0
        assert rotate_index(PieceType.T, 0, clockwise=False) == 3
        assert rotate_index(PieceType.O, 0, clockwise=True) == 0

    def test_piece_cells_are_translated(self):
        cells = piece_cells(PieceType.O, 0, 5, 18)
        assert sorted(cells) == [(4, 18), (4, 19), (5, 18), (5, 19)]


class TestPieceConstruction:
    """Tests for piece construction and validation."""

    def test_piece_from_letter(self):
        piece = piece_from_letter("t")
        assert piece == Piece(PieceType.T, 0, SPAWN_X, SPAWN_Y)

    def test_piece_from_unknown_letter(self):
        with pytest.raises(ValueError, match="Unknown piece letter"):
            piece_from_letter("X")

    def test_spawn_piece(self):
        assert spawn_piece(PieceType.I) == Piece(PieceType.I)

    def test_validate_rotation_out_of_range(self):
        with pytest.raises(ValueError, match="out of range"):
            validate_piece(Piece(PieceType.O, rotation=1))
        with pytest.raises(ValueError):
            validate_piece(Piece(PieceType.T, rotation=-1))

    def test_validate_rejects_non_piece(self):
        with pytest.raises(ValueError):
            validate_piece((PieceType.T, 0, 5, 0))

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError, match="Unknown piece kind"):
            Piece(kind="T")

    def test_spawned_piece_is_valid(self, spawned_piece):
        validate_piece(spawned_piece)
