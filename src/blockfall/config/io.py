# src/blockfall/config/io.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from omegaconf import DictConfig, OmegaConf
from pydantic import BaseModel

from blockfall.config.game import GameConfig


def to_plain_dict(cfg: Any) -> dict[str, Any]:
    if isinstance(cfg, BaseModel):
        return cfg.model_dump(mode="json")
    if isinstance(cfg, DictConfig):
        data = OmegaConf.to_container(cfg, resolve=True)
        if not isinstance(data, dict):
            raise TypeError("config must resolve to a mapping")
        return data
    if isinstance(cfg, Mapping):
        return dict(cfg)
    raise TypeError(f"unsupported config type: {type(cfg).__name__}")


def load_yaml(path: Path) -> dict[str, Any]:
    cfg = OmegaConf.load(Path(path))
    data = OmegaConf.to_container(cfg, resolve=True)
    if not isinstance(data, dict):
        raise TypeError(f"config({path}) must be a mapping")
    return data


def load_game_config(path: Path) -> GameConfig:
    """
    Load a GameConfig from YAML. Accepts either a top-level `game:` section or
    the game fields at the root.
    """
    data = load_yaml(path)
    node = data.get("game", data)
    if node is None:
        node = {}
    if not isinstance(node, dict):
        raise TypeError(f"config({path}).game must be a mapping, got {type(node)!r}")
    return GameConfig.model_validate(node)


__all__ = ["to_plain_dict", "load_yaml", "load_game_config"]
