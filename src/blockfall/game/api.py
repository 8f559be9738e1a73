# src/blockfall/game/api.py
from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from blockfall.config.game import GameConfig
from blockfall.game.core.constants import DEFAULT_HEIGHT, DEFAULT_SEED, DEFAULT_WIDTH
from blockfall.game.core.game import TetrisGame
from blockfall.game.core.piece_rules import PieceRule
from blockfall.game.core.types import Command, Phase, Piece


def new_game(
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        seed: int = DEFAULT_SEED,
        *,
        config: Optional[GameConfig] = None,
        piece_rule: PieceRule | None = None,
        initial_grid: Optional[np.ndarray] = None,
) -> TetrisGame:
    """
    Build a game and spawn its first piece.

    width/height/seed override the matching fields of `config` (defaults otherwise).
    """
    base = config or GameConfig()
    cfg = GameConfig.model_validate({**base.model_dump(), "width": width, "height": height, "seed": seed})
    game = TetrisGame.from_config(cfg, piece_rule=piece_rule)
    return game.reset(initial_grid=initial_grid)


def new_game_from_config(cfg: GameConfig, *, piece_rule: PieceRule | None = None) -> TetrisGame:
    return TetrisGame.from_config(cfg, piece_rule=piece_rule).reset()


def tick(state: TetrisGame, dt: float, commands: Iterable[Command | str] = ()) -> int:
    return state.tick(dt, commands)


def apply_command(state: TetrisGame, cmd: Command | str) -> bool:
    return state.apply_command(cmd)


def grid_snapshot(state: TetrisGame) -> np.ndarray:
    return state.grid_snapshot()


def active_piece(state: TetrisGame) -> Optional[Piece]:
    return state.active_piece()


def phase(state: TetrisGame) -> Phase:
    return state.phase


def last_clear_count(state: TetrisGame) -> int:
    return int(state.last_clear_count)


__all__ = [
    "new_game",
    "new_game_from_config",
    "tick",
    "apply_command",
    "grid_snapshot",
    "active_piece",
    "phase",
    "last_clear_count",
]
