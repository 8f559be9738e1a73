# tests/test_collision.py
from __future__ import annotations

from blockfall.game.core.board import Board
from blockfall.game.core.collision import KickPolicy, drop_distance, is_legal, kick_offsets, try_rotate, try_translate
from blockfall.game.core.pieceset import PieceSet
from blockfall.game.core.types import Piece, Rotation, RotationDirection, TetrominoKind

PS = PieceSet.classic7()


def _piece(kind: TetrominoKind, rot: Rotation, x: int, y: int) -> Piece:
    return Piece(kind=kind, rotation=rot, x=x, y=y)


def test_spawn_position_is_legal_on_empty_board() -> None:
    b = Board.empty(h=20, w=10)
    for kind in TetrominoKind:
        assert is_legal(piece=_piece(kind, Rotation.R0, 4, 18), board=b, pieces=PS)


def test_walls_floor_and_ceiling_are_solid() -> None:
    b = Board.empty(h=20, w=10)
    assert not is_legal(piece=_piece(TetrominoKind.T, Rotation.R0, 0, 5), board=b, pieces=PS)
    assert not is_legal(piece=_piece(TetrominoKind.I, Rotation.R0, 8, 5), board=b, pieces=PS)
    assert not is_legal(piece=_piece(TetrominoKind.O, Rotation.R0, 4, -1), board=b, pieces=PS)
    assert not is_legal(piece=_piece(TetrominoKind.O, Rotation.R0, 4, 19), board=b, pieces=PS)


def test_filled_cell_blocks_placement() -> None:
    b = Board.empty(h=20, w=10)
    b.fill([(5, 1)])
    assert not is_legal(piece=_piece(TetrominoKind.O, Rotation.R0, 4, 0), board=b, pieces=PS)
    assert is_legal(piece=_piece(TetrominoKind.O, Rotation.R0, 4, 2), board=b, pieces=PS)


def test_try_translate_returns_none_when_blocked() -> None:
    b = Board.empty(h=20, w=10)
    p = _piece(TetrominoKind.O, Rotation.R0, 8, 10)
    assert try_translate(piece=p, board=b, pieces=PS, dx=1, dy=0) is None
    assert try_translate(piece=p, board=b, pieces=PS, dx=-1, dy=0) == _piece(TetrominoKind.O, Rotation.R0, 7, 10)


def test_rotation_without_kicks_is_rejected_at_wall() -> None:
    b = Board.empty(h=20, w=10)
    p = _piece(TetrominoKind.I, Rotation.R90, 0, 10)
    assert try_rotate(piece=p, board=b, pieces=PS, direction=RotationDirection.CW, kicks=KickPolicy.NONE) is None


def test_simple_kick_moves_i_piece_off_the_wall() -> None:
    b = Board.empty(h=20, w=10)
    p = _piece(TetrominoKind.I, Rotation.R90, 0, 10)
    out = try_rotate(piece=p, board=b, pieces=PS, direction=RotationDirection.CW, kicks=KickPolicy.SIMPLE)
    assert out == _piece(TetrominoKind.I, Rotation.R180, 2, 10)


def test_simple_kick_shifts_t_piece_right() -> None:
    b = Board.empty(h=20, w=10)
    p = _piece(TetrominoKind.T, Rotation.R90, 0, 5)
    assert try_rotate(piece=p, board=b, pieces=PS, direction=RotationDirection.CW, kicks="none") is None
    out = try_rotate(piece=p, board=b, pieces=PS, direction=RotationDirection.CW, kicks="simple")
    assert out == _piece(TetrominoKind.T, Rotation.R180, 1, 5)


def test_naive_rotation_preferred_over_kicks() -> None:
    b = Board.empty(h=20, w=10)
    p = _piece(TetrominoKind.T, Rotation.R0, 4, 10)
    out = try_rotate(piece=p, board=b, pieces=PS, direction=RotationDirection.CCW, kicks=KickPolicy.SIMPLE)
    assert out == _piece(TetrominoKind.T, Rotation.R270, 4, 10)


def test_kick_offsets_start_with_naive_placement() -> None:
    assert kick_offsets(KickPolicy.NONE, TetrominoKind.T) == ((0, 0),)
    assert kick_offsets(KickPolicy.SIMPLE, TetrominoKind.T) == ((0, 0), (-1, 0), (1, 0), (0, 1))
    assert kick_offsets(KickPolicy.SIMPLE, TetrominoKind.I)[-2:] == ((-2, 0), (2, 0))


def test_drop_distance() -> None:
    b = Board.empty(h=20, w=10)
    p = _piece(TetrominoKind.O, Rotation.R0, 4, 18)
    assert drop_distance(piece=p, board=b, pieces=PS) == 18
    b.fill([(4, 5)])
    assert drop_distance(piece=p, board=b, pieces=PS) == 12
