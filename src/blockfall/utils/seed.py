# src/blockfall/utils/seed.py
from __future__ import annotations

"""
Deterministic per-game seeds for batch runs.

A batch of games driven from one base seed must be reproducible game by game
without games sharing an RNG stream; each game seed is a hash of
(base_seed, game_index). No RNG state is stored here.
"""

_MASK64 = 0xFFFFFFFFFFFFFFFF


def splitmix64(x: int) -> int:
    """
    Stateless 64-bit SplitMix hash of x (treated as unsigned 64-bit).
    """
    z = (int(x) + 0x9E3779B97F4A7C15) & _MASK64
    z = (z ^ (z >> 30)) * 0xBF58476D1CE4E5B9 & _MASK64
    z = (z ^ (z >> 27)) * 0x94D049BB133111EB & _MASK64
    return int((z ^ (z >> 31)) & _MASK64)


def game_seed(*, base_seed: int, game_index: int) -> int:
    """
    Seed for the game_index-th game of a batch started from base_seed.

    Same inputs give the same seed; the result fits in [0, 2^31 - 1] so it is
    also a valid GameConfig.seed.
    """
    if int(game_index) < 0:
        raise ValueError(f"game_index must be >= 0, got {game_index}")
    return int(splitmix64((int(base_seed) << 32) ^ int(game_index)) & 0x7FFFFFFF)


__all__ = ["splitmix64", "game_seed"]
