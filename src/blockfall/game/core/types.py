# src/blockfall/game/core/types.py
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, IntEnum, auto
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from blockfall.game.core.pieceset import PieceSet

Cell = Tuple[int, int]


class TetrominoKind(str, Enum):
    I = "I"
    J = "J"
    L = "L"
    O = "O"
    S = "S"
    T = "T"
    Z = "Z"


class Rotation(IntEnum):
    R0 = 0
    R90 = 1
    R180 = 2
    R270 = 3

    def step(self, direction: int) -> "Rotation":
        return Rotation((int(self) + int(direction)) % 4)


class RotationDirection(IntEnum):
    CW = 1
    CCW = -1


class Command(Enum):
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()
    ROTATE_CW = auto()
    ROTATE_CCW = auto()
    SOFT_DROP = auto()
    HARD_DROP = auto()


class Phase(Enum):
    SPAWNING = auto()
    ACTIVE = auto()
    LOCKING = auto()
    CLEARING = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class Piece:
    """
    The falling piece: kind, rotation state and anchor in board space.

    Occupied cells are never stored; they are derived from the PieceSet offset
    table for (kind, rotation), so stored cells cannot drift from the rotation.
    """

    kind: TetrominoKind
    rotation: Rotation
    x: int
    y: int

    def absolute_cells(self, pieces: "PieceSet") -> Tuple[Cell, ...]:
        return tuple((self.x + dx, self.y + dy) for dx, dy in pieces.offsets(self.kind, self.rotation))

    def rotated(self, direction: RotationDirection | int) -> "Piece":
        return replace(self, rotation=self.rotation.step(int(direction)))

    def translated(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + int(dx), y=self.y + int(dy))


__all__ = [
    "Cell",
    "Command",
    "Phase",
    "Piece",
    "Rotation",
    "RotationDirection",
    "TetrominoKind",
]
