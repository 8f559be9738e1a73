# src/blockfall/config/game.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, ValidationInfo, field_validator

from blockfall.config.base import ConfigBase
from blockfall.game.core.constants import (
    DEFAULT_FALL_INTERVAL,
    DEFAULT_HEIGHT,
    DEFAULT_LOCK_DELAY,
    DEFAULT_SEED,
    DEFAULT_WIDTH,
)

PieceRuleName = Literal["uniform", "bag7", "gameboy"]
KickPolicyName = Literal["none", "simple"]


def _as_int(value: object, *, where: str) -> int:
    if isinstance(value, bool):
        raise TypeError(f"{where} must be an int, got bool")
    if not isinstance(value, (int, float, str, bytes, bytearray)):
        raise TypeError(f"{where} must be an int-like value, got {type(value)!r}")
    try:
        return int(value)
    except Exception as e:
        raise TypeError(f"{where} must be an int-like value, got {type(value)!r}") from e


class GameConfig(ConfigBase):
    """
    Engine-facing game config.

    Single home for everything the simulation core needs:
      - board size and seed
      - piece rule and preview length
      - gravity / lock-delay timing (seconds)
      - rotation kick policy
    """

    width: int = Field(default=DEFAULT_WIDTH, ge=4)
    height: int = Field(default=DEFAULT_HEIGHT, ge=2)
    seed: int = Field(default=DEFAULT_SEED, ge=0)
    piece_rule: PieceRuleName = "uniform"
    preview_size: int = Field(default=1, ge=1)
    fall_interval: float = Field(default=DEFAULT_FALL_INTERVAL, gt=0.0)
    lock_delay: float = Field(default=DEFAULT_LOCK_DELAY, ge=0.0)
    lock_reset_limit: Optional[int] = Field(default=None, ge=0)
    kicks: KickPolicyName = "simple"

    @field_validator("seed", "width", "height", "preview_size", mode="before")
    @classmethod
    def _int_like(cls, v: object, info: ValidationInfo) -> int:
        return _as_int(v, where=f"game.{info.field_name}")

    @field_validator("piece_rule", "kicks", mode="before")
    @classmethod
    def _lower(cls, v: object) -> str:
        return str(v).strip().lower()


__all__ = ["GameConfig", "PieceRuleName", "KickPolicyName"]
