# src/blockfall/__init__.py
from __future__ import annotations

from blockfall.config.game import GameConfig
from blockfall.game.api import (
    active_piece,
    apply_command,
    grid_snapshot,
    last_clear_count,
    new_game,
    new_game_from_config,
    phase,
    tick,
)
from blockfall.game.core.board import Board, BoardInvariantError
from blockfall.game.core.game import TetrisGame
from blockfall.game.core.types import Command, Phase, Piece, Rotation, RotationDirection, TetrominoKind

__all__ = [
    "GameConfig",
    "TetrisGame",
    "Board",
    "BoardInvariantError",
    "Command",
    "Phase",
    "Piece",
    "Rotation",
    "RotationDirection",
    "TetrominoKind",
    "new_game",
    "new_game_from_config",
    "tick",
    "apply_command",
    "grid_snapshot",
    "active_piece",
    "phase",
    "last_clear_count",
]
