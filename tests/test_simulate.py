# tests/test_simulate.py
from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from blockfall.apps.simulate.entrypoint import parse_args, play_game, resolve_game_config, run_simulation
from blockfall.apps.simulate.entrypoint import _command_weights
from blockfall.config.game import GameConfig
from blockfall.game.core.game import TetrisGame
from blockfall.utils.seed import game_seed


def test_game_seed_is_deterministic_and_in_range() -> None:
    a = [game_seed(base_seed=12345, game_index=i) for i in range(20)]
    b = [game_seed(base_seed=12345, game_index=i) for i in range(20)]
    assert a == b
    assert len(set(a)) == 20
    assert all(0 <= s <= 0x7FFFFFFF for s in a)
    with pytest.raises(ValueError, match="game_index"):
        game_seed(base_seed=1, game_index=-1)


def test_resolve_game_config_applies_overrides(tmp_path: Path) -> None:
    path = tmp_path / "game.yaml"
    path.write_text("game:\n  width: 8\n  piece_rule: uniform\n", encoding="utf-8")
    args = parse_args(["--config", str(path), "--piece-rule", "bag7", "--seed", "4"])
    cfg = resolve_game_config(args)
    assert cfg == GameConfig(width=8, piece_rule="bag7", seed=4)


def test_play_game_reaches_game_over_with_hard_drops() -> None:
    game = TetrisGame(seed=1, piece_rule="bag7").reset()
    stats = play_game(
        game=game,
        rng=np.random.default_rng(0),
        dt=1.0 / 60.0,
        max_frames=50_000,
        command_prob=1.0,
        weights=_command_weights(1.0),
    )
    assert stats.game_over
    assert stats.pieces > 0
    assert stats.frames == game.frames


def test_run_simulation_smoke() -> None:
    args = parse_args(["--games", "2", "--max-frames", "300", "--seed", "7", "--no-rich", "--log-level", "warning"])
    assert run_simulation(args) == 0


def test_run_simulation_rejects_bad_probability() -> None:
    args = parse_args(["--command-prob", "1.5", "--no-rich", "--log-level", "warning"])
    with pytest.raises(ValueError, match="command-prob"):
        run_simulation(args)
