# src/blockfall/game/core/spawn.py
from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Tuple

import numpy as np

from blockfall.game.core.piece_rules import PieceRule, UniformPieceRule
from blockfall.game.core.pieceset import PieceSet
from blockfall.game.core.types import Piece, Rotation, TetrominoKind


def spawn_anchor(*, width: int, height: int) -> Tuple[int, int]:
    """
    Fixed spawn anchor: left-of-center column, second row from the top.

    Every R0 shape spans offsets x in [-1, 2] and y in [0, 1] around its
    anchor, so on a board at least 4 wide and 2 tall the spawn fits exactly.
    """
    return (int(width) // 2) - 1, int(height) - 2


class SpawnController:
    """
    Owns the spawn queue (preview of upcoming kinds) and builds new pieces.

    The queue holds `preview_size` kinds at all times after reset(); each
    spawn pops the head and asks the piece rule for one replacement.
    """

    def __init__(
            self,
            *,
            width: int,
            height: int,
            pieces: PieceSet,
            piece_rule: PieceRule | None = None,
            preview_size: int = 1,
    ) -> None:
        if int(preview_size) < 1:
            raise ValueError(f"preview_size must be >= 1, got {preview_size}")
        self.width = int(width)
        self.height = int(height)
        self.pieces = pieces
        self.preview_size = int(preview_size)
        self._piece_rule: PieceRule = piece_rule or UniformPieceRule()
        self._queue: Deque[TetrominoKind] = deque()
        self._last_locked_kind: Optional[TetrominoKind] = None

    @property
    def anchor(self) -> Tuple[int, int]:
        return spawn_anchor(width=self.width, height=self.height)

    def reset(self, *, rng: np.random.Generator) -> None:
        self._queue.clear()
        self._last_locked_kind = None
        self._piece_rule.reset(rng=rng, kinds=self.pieces.kinds())
        while len(self._queue) < self.preview_size:
            self._push_next()

    def _push_next(self) -> None:
        preview = self._queue[-1] if self._queue else None
        nk = self._piece_rule.next_piece(locked_kind=self._last_locked_kind, preview_kind=preview)
        if nk is None:
            raise RuntimeError("PieceRule.next_piece returned None (invalid).")
        self._queue.append(TetrominoKind(nk))

    def note_locked(self, kind: TetrominoKind) -> None:
        self._last_locked_kind = TetrominoKind(kind)

    def upcoming(self) -> Tuple[TetrominoKind, ...]:
        return tuple(self._queue)

    def spawn(self) -> Piece:
        if not self._queue:
            raise RuntimeError("SpawnController.reset() must be called before spawn()")
        kind = self._queue.popleft()
        self._push_next()
        x, y = self.anchor
        return Piece(kind=kind, rotation=Rotation.R0, x=x, y=y)


__all__ = ["SpawnController", "spawn_anchor"]
