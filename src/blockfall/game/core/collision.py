# src/blockfall/game/core/collision.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from blockfall.game.core.board import Board
from blockfall.game.core.pieceset import PieceSet
from blockfall.game.core.types import Piece, RotationDirection, TetrominoKind


class KickPolicy(str, Enum):
    NONE = "none"
    SIMPLE = "simple"


# Tried in order after a rejected naive rotation; the first legal one wins.
_SIMPLE_KICKS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, 1))
_SIMPLE_KICKS_I: Tuple[Tuple[int, int], ...] = _SIMPLE_KICKS + ((-2, 0), (2, 0))

_KICK_TABLES: Dict[KickPolicy, Dict[TetrominoKind, Tuple[Tuple[int, int], ...]]] = {
    KickPolicy.NONE: {},
    KickPolicy.SIMPLE: {k: (_SIMPLE_KICKS_I if k == TetrominoKind.I else _SIMPLE_KICKS) for k in TetrominoKind},
}


def kick_offsets(policy: KickPolicy | str, kind: TetrominoKind) -> Tuple[Tuple[int, int], ...]:
    """
    Candidate offsets for a rotation of `kind`, naive placement (0, 0) first.
    """
    table = _KICK_TABLES[KickPolicy(policy)]
    return ((0, 0),) + table.get(TetrominoKind(kind), ())


def is_legal(*, piece: Piece, board: Board, pieces: PieceSet) -> bool:
    for x, y in piece.absolute_cells(pieces):
        if board.is_occupied(x, y):
            return False
    return True


def try_translate(*, piece: Piece, board: Board, pieces: PieceSet, dx: int, dy: int) -> Optional[Piece]:
    cand = piece.translated(dx, dy)
    if is_legal(piece=cand, board=board, pieces=pieces):
        return cand
    return None


def try_rotate(
        *,
        piece: Piece,
        board: Board,
        pieces: PieceSet,
        direction: RotationDirection | int,
        kicks: KickPolicy | str = KickPolicy.NONE,
) -> Optional[Piece]:
    """
    Rotate one step, trying kick offsets in order. Returns None if every candidate collides.
    """
    rotated = piece.rotated(direction)
    for dx, dy in kick_offsets(kicks, piece.kind):
        cand = rotated.translated(dx, dy)
        if is_legal(piece=cand, board=board, pieces=pieces):
            return cand
    return None


def drop_distance(*, piece: Piece, board: Board, pieces: PieceSet) -> int:
    """
    Number of rows the piece can fall before it is blocked.
    """
    n = 0
    while is_legal(piece=piece.translated(0, -(n + 1)), board=board, pieces=pieces):
        n += 1
    return n


__all__ = ["KickPolicy", "kick_offsets", "is_legal", "try_translate", "try_rotate", "drop_distance"]
