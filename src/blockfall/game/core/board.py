# src/blockfall/game/core/board.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from blockfall.game.core.constants import EMPTY_CELL, MAX_COLOR_ID


class BoardInvariantError(RuntimeError):
    """
    Raised when the board is asked to do something the collision contract forbids
    (e.g. locking onto a filled or out-of-bounds cell). Always a programming error.
    """


@dataclass
class Board:
    """
    Locked cells only. grid[y, x] with row 0 at the bottom.

    Cell encoding:
      0      = empty
      1..255 = filled with that color id
    """

    h: int
    w: int
    grid: np.ndarray

    @classmethod
    def empty(cls, *, h: int, w: int) -> "Board":
        if int(h) <= 0 or int(w) <= 0:
            raise ValueError(f"board dimensions must be positive, got h={h} w={w}")
        return cls(h=int(h), w=int(w), grid=np.zeros((int(h), int(w)), dtype=np.uint8))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.w and 0 <= y < self.h

    def is_occupied(self, x: int, y: int) -> bool:
        # Outside the board counts as solid: the edges are implicit walls.
        if not self.in_bounds(x, y):
            return True
        return int(self.grid[y, x]) != EMPTY_CELL

    def cell(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.w}x{self.h} board")
        return int(self.grid[y, x])

    def lock_cells(self, cells: Sequence[Tuple[int, int, int]]) -> None:
        """
        Write (x, y, color_id) cells into the board.

        All cells are validated before anything is written, so a failing call
        leaves the board untouched.
        """
        seen: set[tuple[int, int]] = set()
        for x, y, color_id in cells:
            if not (1 <= int(color_id) <= MAX_COLOR_ID):
                raise BoardInvariantError(f"color id must be in [1,{MAX_COLOR_ID}], got {color_id!r}")
            if not self.in_bounds(x, y):
                raise BoardInvariantError(f"lock outside board at ({x}, {y}) on {self.w}x{self.h}")
            if int(self.grid[y, x]) != EMPTY_CELL or (x, y) in seen:
                raise BoardInvariantError(f"lock onto filled cell ({x}, {y})")
            seen.add((x, y))

        for x, y, color_id in cells:
            self.grid[y, x] = int(color_id)

    def full_rows(self) -> List[int]:
        full = np.all(self.grid != EMPTY_CELL, axis=1)
        return np.flatnonzero(full).astype(int).tolist()

    def clear_full_rows(self) -> int:
        # One snapshot mask, one compaction: simultaneous clears never re-scan.
        full = np.all(self.grid != EMPTY_CELL, axis=1)
        cleared = int(full.sum())
        if cleared <= 0:
            return 0
        kept = self.grid[~full]
        new_rows = np.zeros((cleared, self.w), dtype=np.uint8)
        # Row 0 is the bottom, so exposed empty rows go on top (high indices).
        self.grid = np.vstack([kept, new_rows])
        return cleared

    def fill(self, cells: Iterable[Tuple[int, int]], color_id: int = 1) -> None:
        """
        Setup helper for scenarios and tests: overwrite cells with color_id.
        """
        for x, y in cells:
            if not self.in_bounds(x, y):
                raise IndexError(f"cell ({x}, {y}) outside {self.w}x{self.h} board")
            self.grid[y, x] = int(color_id)

    def is_empty(self) -> bool:
        return not bool(np.any(self.grid != EMPTY_CELL))

    def snapshot(self) -> np.ndarray:
        return self.grid.copy()


__all__ = ["Board", "BoardInvariantError"]
