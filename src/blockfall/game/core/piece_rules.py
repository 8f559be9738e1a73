# src/blockfall/game/core/piece_rules.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from blockfall.game.core.constants import CLASSIC_NUM_PIECES
from blockfall.game.core.types import TetrominoKind


class PieceRule(ABC):
    """
    Piece selection rule interface.

    Lifecycle:
      - reset(rng=..., kinds=...) is called once per game
      - next_piece(...) is called whenever the spawn queue needs one more kind

    Notes:
      - The RNG is game-owned and injected; rules must not create their own streams.
      - Rules may be stateful between calls.
    """

    @abstractmethod
    def reset(self, *, rng: np.random.Generator, kinds: Sequence[TetrominoKind]) -> None:
        raise NotImplementedError

    @abstractmethod
    def next_piece(self, *, locked_kind: TetrominoKind | None, preview_kind: TetrominoKind | None) -> TetrominoKind:
        raise NotImplementedError


@dataclass
class UniformPieceRule(PieceRule):
    """
    Uniform random choice among the available kinds, one at a time.
    """

    _rng: np.random.Generator | None = None
    _kinds: tuple[TetrominoKind, ...] = ()

    def reset(self, *, rng: np.random.Generator, kinds: Sequence[TetrominoKind]) -> None:
        self._rng = rng
        self._kinds = tuple(TetrominoKind(k) for k in kinds)
        if not self._kinds:
            raise ValueError("UniformPieceRule requires non-empty kinds")

    def next_piece(self, *, locked_kind: TetrominoKind | None, preview_kind: TetrominoKind | None) -> TetrominoKind:
        if self._rng is None or not self._kinds:
            raise RuntimeError("UniformPieceRule.reset() must be called before next_piece()")
        i = int(self._rng.integers(0, len(self._kinds)))
        return self._kinds[i]


@dataclass
class GameBoyOrPieceRule(PieceRule):
    """
    Game Boy-style accept/reject rule.

    A candidate is rejected (and redrawn) when
        (locked_idx | preview_idx | candidate_idx) == 7
    Missing history (first pieces of a game) never rejects.

    Defined for the classic 7 tetromino set only.
    """

    _rng: np.random.Generator | None = None
    _kinds: tuple[TetrominoKind, ...] = ()
    _kind_to_idx: dict[TetrominoKind, int] | None = None

    def reset(self, *, rng: np.random.Generator, kinds: Sequence[TetrominoKind]) -> None:
        self._rng = rng
        self._kinds = tuple(TetrominoKind(k) for k in kinds)
        if len(self._kinds) != int(CLASSIC_NUM_PIECES):
            raise ValueError(
                "GameBoyOrPieceRule requires the classic 7 tetromino set "
                f"(got {len(self._kinds)} kinds). Use UniformPieceRule for custom PieceSets."
            )
        self._kind_to_idx = {k: i for i, k in enumerate(self._kinds)}

    def next_piece(self, *, locked_kind: TetrominoKind | None, preview_kind: TetrominoKind | None) -> TetrominoKind:
        if self._rng is None or self._kind_to_idx is None:
            raise RuntimeError("GameBoyOrPieceRule.reset() must be called before next_piece()")

        ci = int(self._rng.integers(0, int(CLASSIC_NUM_PIECES)))
        if locked_kind is None or preview_kind is None:
            return self._kinds[ci]

        li = self._kind_to_idx[TetrominoKind(locked_kind)]
        pi = self._kind_to_idx[TetrominoKind(preview_kind)]
        while (li | pi | ci) == 7:
            ci = int(self._rng.integers(0, int(CLASSIC_NUM_PIECES)))
        return self._kinds[ci]


@dataclass
class BagPieceRule(PieceRule):
    """
    K-bag randomizer (generalization of 7-bag).

    bag_copies=1 is the classic 7-bag: every run of 7 consecutive draws
    aligned to a bag boundary contains each kind exactly once.
    Deterministic w.r.t. the injected RNG.
    """

    bag_copies: int = 1

    _rng: np.random.Generator | None = None
    _kinds: tuple[TetrominoKind, ...] = ()
    _bag: list[TetrominoKind] = field(default_factory=list)

    def reset(self, *, rng: np.random.Generator, kinds: Sequence[TetrominoKind]) -> None:
        self._rng = rng
        self._kinds = tuple(TetrominoKind(k) for k in kinds)
        if not self._kinds:
            raise ValueError("BagPieceRule requires non-empty kinds")
        if int(self.bag_copies) <= 0:
            raise ValueError(f"BagPieceRule.bag_copies must be >= 1 (got {self.bag_copies})")
        self._bag = []
        self._refill()

    def _refill(self) -> None:
        if self._rng is None or not self._kinds:
            raise RuntimeError("BagPieceRule.reset() must be called before _refill()")
        self._bag = [k for k in self._kinds for _ in range(int(self.bag_copies))]
        self._rng.shuffle(self._bag)

    def next_piece(self, *, locked_kind: TetrominoKind | None, preview_kind: TetrominoKind | None) -> TetrominoKind:
        if self._rng is None or not self._kinds:
            raise RuntimeError("BagPieceRule.reset() must be called before next_piece()")
        if not self._bag:
            self._refill()
        return self._bag.pop()


@dataclass
class SequencePieceRule(PieceRule):
    """
    Cycles through a fixed list of kinds. Ignores the RNG.

    Used for scripted scenarios and replays.
    """

    sequence: tuple[TetrominoKind, ...] = ()

    _pos: int = 0

    def __post_init__(self) -> None:
        self.sequence = tuple(TetrominoKind(k) for k in self.sequence)
        if not self.sequence:
            raise ValueError("SequencePieceRule requires a non-empty sequence")

    def reset(self, *, rng: np.random.Generator, kinds: Sequence[TetrominoKind]) -> None:
        allowed = {TetrominoKind(k) for k in kinds}
        unknown = [k.value for k in self.sequence if k not in allowed]
        if unknown:
            raise ValueError(f"SequencePieceRule has kinds not in the piece set: {unknown!r}")
        self._pos = 0

    def next_piece(self, *, locked_kind: TetrominoKind | None, preview_kind: TetrominoKind | None) -> TetrominoKind:
        k = self.sequence[self._pos % len(self.sequence)]
        self._pos += 1
        return k


def make_piece_rule(name: str) -> PieceRule:
    n = str(name).strip().lower()
    if n == "uniform":
        return UniformPieceRule()
    if n == "bag7":
        return BagPieceRule(bag_copies=1)
    if n == "gameboy":
        return GameBoyOrPieceRule()
    raise ValueError(f"piece_rule must be 'uniform'|'bag7'|'gameboy', got {name!r}")


__all__ = [
    "PieceRule",
    "UniformPieceRule",
    "GameBoyOrPieceRule",
    "BagPieceRule",
    "SequencePieceRule",
    "make_piece_rule",
]
