# src/blockfall/config/__init__.py
from __future__ import annotations

from blockfall.config.base import ConfigBase
from blockfall.config.game import GameConfig
from blockfall.config.io import load_game_config, load_yaml, to_plain_dict

__all__ = ["ConfigBase", "GameConfig", "load_game_config", "load_yaml", "to_plain_dict"]
