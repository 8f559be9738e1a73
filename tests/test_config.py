# tests/test_config.py
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from blockfall.config.game import GameConfig
from blockfall.config.io import load_game_config, to_plain_dict
from blockfall.game.api import new_game, new_game_from_config
from blockfall.game.core.collision import KickPolicy
from blockfall.utils.paths import default_game_config_path


def test_defaults() -> None:
    cfg = GameConfig()
    assert (cfg.width, cfg.height, cfg.seed) == (10, 20, 12345)
    assert cfg.piece_rule == "uniform"
    assert cfg.kicks == "simple"
    assert cfg.lock_reset_limit is None


def test_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError, match="gravity"):
        GameConfig.model_validate({"gravity": 2.0})


def test_rejects_narrow_board() -> None:
    with pytest.raises(ValidationError, match="width"):
        GameConfig(width=3)


def test_accepts_large_board() -> None:
    cfg = GameConfig(width=300, height=400)
    assert (cfg.width, cfg.height) == (300, 400)


def test_rejects_non_positive_fall_interval() -> None:
    with pytest.raises(ValidationError, match="fall_interval"):
        GameConfig(fall_interval=0.0)


def test_normalizes_names() -> None:
    cfg = GameConfig.model_validate({"piece_rule": " BAG7 ", "kicks": "None"})
    assert cfg.piece_rule == "bag7"
    assert cfg.kicks == "none"


def test_rejects_unknown_piece_rule() -> None:
    with pytest.raises(ValidationError, match="piece_rule"):
        GameConfig.model_validate({"piece_rule": "random"})


def test_config_is_frozen() -> None:
    cfg = GameConfig()
    with pytest.raises(ValidationError):
        cfg.width = 12  # type: ignore[misc]


def test_load_game_config_from_game_section(tmp_path: Path) -> None:
    path = tmp_path / "game.yaml"
    path.write_text(
        "game:\n"
        "  width: 8\n"
        "  height: 16\n"
        "  piece_rule: bag7\n"
        "  lock_delay: 0.25\n",
        encoding="utf-8",
    )
    cfg = load_game_config(path)
    assert (cfg.width, cfg.height, cfg.piece_rule, cfg.lock_delay) == (8, 16, "bag7", 0.25)


def test_load_game_config_from_root_fields(tmp_path: Path) -> None:
    path = tmp_path / "game.yaml"
    path.write_text("seed: 7\nkicks: none\n", encoding="utf-8")
    cfg = load_game_config(path)
    assert cfg.seed == 7
    assert cfg.kicks == "none"


def test_repo_default_config_loads() -> None:
    cfg = load_game_config(default_game_config_path())
    assert cfg.piece_rule == "bag7"
    assert cfg.preview_size == 3


def test_to_plain_dict_round_trips_model() -> None:
    cfg = GameConfig(seed=5)
    assert GameConfig.model_validate(to_plain_dict(cfg)) == cfg


def test_new_game_from_config_applies_timing_and_kicks() -> None:
    cfg = GameConfig(fall_interval=0.5, lock_delay=0.1, kicks="none", preview_size=2)
    game = new_game_from_config(cfg)
    assert game.fall.fall_interval == 0.5
    assert game.fall.lock_delay == 0.1
    assert game.kicks == KickPolicy.NONE
    assert len(game.upcoming()) == 2


def test_new_game_positional_size_overrides_config() -> None:
    game = new_game(8, 12, 3, config=GameConfig(piece_rule="bag7"))
    assert game.grid_snapshot().shape == (12, 8)
    assert game.seed == 3
    p = game.active_piece()
    assert (p.x, p.y) == (3, 10)
